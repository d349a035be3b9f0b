"""
Button widgets for pagination controls.

Widgets carry their state as plain attributes so callers and tests can
inspect them, and render to OOUI-style HTML on demand. They implement
__html__, so Jinja templates embed them without double escaping.
"""

from typing import Any, List, Optional

from markupsafe import Markup


class ButtonWidget:
    """A link styled as a button."""

    def __init__(
        self,
        href: Optional[str] = None,
        title: Optional[str] = None,
        label: Any = '',
        disabled: bool = False,
        active: bool = False
    ):
        self.href = href
        self.title = title
        self.label = str(label)
        self.disabled = bool(disabled)
        self.active = bool(active)

    def classes(self) -> List[str]:
        classes = ['oo-ui-widget']
        classes.append('oo-ui-widget-disabled' if self.disabled else 'oo-ui-widget-enabled')
        classes += ['oo-ui-buttonElement', 'oo-ui-buttonElement-framed',
                    'oo-ui-labelElement', 'oo-ui-buttonWidget']
        if self.active:
            classes.append('oo-ui-buttonElement-active')
        return classes

    def to_html(self) -> Markup:
        """
        Render the button.

        A disabled button keeps its label but drops the link target, so it
        cannot be followed.
        """
        outer = Markup('<span aria-disabled="{}" class="{}"').format(
            'true' if self.disabled else 'false', ' '.join(self.classes()))
        if self.title:
            outer += Markup(' title="{}"').format(self.title)
        outer += Markup('>')

        if self.disabled:
            anchor = Markup('<a role="button" tabindex="-1" aria-disabled="true" '
                            'class="oo-ui-buttonElement-button">')
        else:
            anchor = Markup('<a role="button" tabindex="0" href="{}" rel="nofollow" '
                            'class="oo-ui-buttonElement-button">').format(self.href or '')

        label = Markup('<span class="oo-ui-labelElement-label">{}</span>').format(self.label)
        return outer + anchor + label + Markup('</a></span>')

    def __html__(self) -> str:
        return str(self.to_html())

    def __str__(self) -> str:
        return self.__html__()

    def __repr__(self) -> str:
        flags = []
        if self.disabled:
            flags.append('disabled')
        if self.active:
            flags.append('active')
        suffix = f" [{', '.join(flags)}]" if flags else ''
        return f"ButtonWidget({self.label!r} -> {self.href}){suffix}"


class ButtonGroupWidget:
    """An ordered row of buttons rendered side by side."""

    def __init__(self, items: Optional[List[ButtonWidget]] = None):
        self.items = list(items or [])

    def to_html(self) -> Markup:
        inner = Markup('').join(item.to_html() for item in self.items)
        return (Markup('<div class="oo-ui-widget oo-ui-widget-enabled oo-ui-buttonGroupWidget">')
                + inner + Markup('</div>'))

    def __html__(self) -> str:
        return str(self.to_html())

    def __str__(self) -> str:
        return self.__html__()

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return f"ButtonGroupWidget({len(self.items)} items)"

