"""
Label Overlay
Draws grid labels as 2D text actors pinned to the viewport edges.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from vtkmodules.vtkRenderingCore import vtkRenderer, vtkTextActor

from geogrid.model.memory_map import InMemoryMap, ListLabelContainer
from geogrid.model.types import Anchor, LabelDescriptor, ViewportSize


class TextActorLabelContainer(ListLabelContainer):
    def __init__(
        self,
        renderer: vtkRenderer,
        viewport_size: Callable[[], ViewportSize],
        owner: Optional[InMemoryMap] = None,
        font_size: int = 12,
        color: Tuple[float, float, float] = (0.0, 0.0, 0.0),
        padding: int = 6,
    ) -> None:
        super().__init__(owner=owner)
        self.renderer = renderer
        self.viewport_size = viewport_size
        self.font_size = font_size
        self.color = color
        self.padding = padding
        self._actors: List[vtkTextActor] = []

    def append(self, label: LabelDescriptor) -> None:
        super().append(label)

        t = vtkTextActor()
        t.SetInput(label.text)
        prop = t.GetTextProperty()
        prop.SetColor(*self.color)
        prop.SetFontSize(self.font_size)

        x, y = self._display_position(label)
        if label.anchor == Anchor.LEFT:
            prop.SetJustificationToLeft()
            prop.SetVerticalJustificationToCentered()
        elif label.anchor == Anchor.RIGHT:
            prop.SetJustificationToRight()
            prop.SetVerticalJustificationToCentered()
        elif label.anchor == Anchor.TOP:
            prop.SetJustificationToCentered()
            prop.SetVerticalJustificationToTop()
        else:
            prop.SetJustificationToCentered()
            prop.SetVerticalJustificationToBottom()

        t.SetDisplayPosition(int(x), int(y))
        t.SetVisibility(self.is_visible())
        self.renderer.AddActor2D(t)
        self._actors.append(t)

    def clear(self) -> None:
        super().clear()
        for a in self._actors:
            self.renderer.RemoveActor2D(a)
        self._actors.clear()

    def set_visible(self, visible: bool) -> None:
        super().set_visible(visible)
        for a in self._actors:
            a.SetVisibility(visible)

    def destroy(self) -> None:
        self.clear()
        super().destroy()

    def _display_position(self, label: LabelDescriptor) -> Tuple[float, float]:
        """Screen (top-left origin) -> VTK display (bottom-left origin), nudged inwards."""
        size = self.viewport_size()
        pad = self.padding
        display_y = size.height - label.screen_y

        if label.anchor == Anchor.LEFT:
            return label.screen_x + pad, display_y
        if label.anchor == Anchor.RIGHT:
            return label.screen_x - pad, display_y
        if label.anchor == Anchor.TOP:
            return label.screen_x, display_y - pad
        return label.screen_x, display_y + pad
