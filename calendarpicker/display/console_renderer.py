"""Console-based calendar renderer."""

import logging
import os
import subprocess
from typing import Any, List, Optional

from ..core.models import DayState, RangeValue, SubView
from ..ui.calendar import CalendarRender, CellRender, GridRender, MonthPickerRender, YearPickerRender

logger = logging.getLogger(__name__)

CELL_WIDTH = 4
PICKER_COLUMNS = 4

# (left, right) markers around the day number
STATE_MARKERS = {
    DayState.DEFAULT: (" ", " "),
    DayState.TODAY: ("(", ")"),
    DayState.SELECTED: ("[", "]"),
    DayState.RANGE_START: ("[", "-"),
    DayState.RANGE_CENTER: ("-", "-"),
    DayState.RANGE_END: ("-", "]"),
    DayState.DISABLED: (" ", "x"),
}

FOCUS_MARKERS = (">", "<")

LEGEND = "(d) today  [d] selected  [d- -d] range  >d< focus  dx disabled"

NAVIGATION_HELP = (
    "Arrows: Move | PgUp/PgDn: Month | Shift+PgUp/PgDn: Year | Enter: Select",
    "m: Months | y: Years | [ ]: Step | p: Presets | Esc: Exit",
)


def format_value(value: Any) -> str:
    """Human-readable calendar value."""
    if isinstance(value, RangeValue):
        if value.is_empty:
            return "none"
        start = value.start.isoformat() if value.start else "..."
        end = value.end.isoformat() if value.end else "..."
        return f"{start} -> {end}"
    if value is None:
        return "none"
    return value.isoformat()


class ConsoleRenderer:
    """Renders a :class:`CalendarRender` snapshot as terminal text."""

    def __init__(self, settings: Optional[Any] = None) -> None:
        """Initialize console renderer.

        Args:
            settings: Application settings (unused by the text layout)
        """
        self.settings = settings
        self.width = 60  # Console display width

        logger.debug("Console renderer initialized")

    def render(
        self,
        snapshot: CalendarRender,
        picker_cursor: Optional[int] = None,
        show_help: bool = True,
    ) -> str:
        """Render a calendar snapshot to formatted console output.

        Args:
            snapshot: Render snapshot from the calendar session
            picker_cursor: Highlighted index in the month/year picker, if any
            show_help: Whether to append the key help lines

        Returns:
            Formatted string for console display
        """
        lines = ["=" * self.width, self._center(f"CALENDAR - {snapshot.title}"), "=" * self.width]

        if snapshot.show_presets and snapshot.presets:
            lines.append(self._render_presets(snapshot))
            lines.append("-" * self.width)

        if snapshot.sub_view is SubView.DAYS:
            lines.extend(self._render_grids(snapshot.grids))
        elif snapshot.sub_view is SubView.MONTHS and snapshot.month_picker is not None:
            lines.extend(self._render_month_picker(snapshot.month_picker, picker_cursor))
        elif snapshot.year_picker is not None:
            lines.extend(self._render_year_picker(snapshot.year_picker, picker_cursor))

        lines.append("-" * self.width)
        lines.append(f"Selected: {format_value(snapshot.value)}")
        if snapshot.sub_view is SubView.DAYS:
            lines.append(f"Focus: {snapshot.focused_date.isoformat()}")
        if snapshot.show_actions:
            lines.append("c: Clear | a: Apply")

        if show_help:
            lines.append("-" * self.width)
            if snapshot.sub_view is SubView.DAYS:
                lines.append(LEGEND)
            lines.extend(NAVIGATION_HELP)

        lines.append("=" * self.width)
        return "\n".join(lines)

    def _center(self, text: str) -> str:
        return text.center(self.width).rstrip()

    def format_cell(self, cell: CellRender) -> str:
        """Format one day cell as ``CELL_WIDTH`` characters."""
        if not cell.cell.in_current_month and cell.state in (DayState.DEFAULT, DayState.TODAY):
            return " " * CELL_WIDTH
        left, right = STATE_MARKERS[cell.state]
        if cell.tabindex == 0 and cell.state in (DayState.DEFAULT, DayState.TODAY):
            left, right = FOCUS_MARKERS
        return f"{left}{cell.day:2d}{right}"

    def render_grid(self, grid: GridRender) -> List[str]:
        """Render one month grid: title, weekday header and weeks."""
        grid_width = CELL_WIDTH * len(grid.column_headers)
        lines = [grid.label.center(grid_width)]
        lines.append("".join(f" {name} " for name in grid.column_headers))
        for week in grid.weeks:
            lines.append("".join(self.format_cell(cell) for cell in week))
        return lines

    def _render_grids(self, grids: List[GridRender]) -> List[str]:
        if not grids:
            return []
        rendered = [self.render_grid(grid) for grid in grids]
        if len(rendered) == 1:
            return rendered[0]

        # Side by side; pad the shorter month with blank weeks
        grid_width = CELL_WIDTH * 7
        gap = " " * (self.width - 2 * grid_width)
        height = max(len(block) for block in rendered)
        for block in rendered:
            block.extend([" " * grid_width] * (height - len(block)))
        return [f"{left}{gap}{right}".rstrip() for left, right in zip(rendered[0], rendered[1])]

    def _render_picker_rows(self, labels: List[str], cursor: Optional[int]) -> List[str]:
        cells = []
        for index, label in enumerate(labels):
            if index == cursor:
                cells.append(f">{label}<")
            else:
                cells.append(f" {label} ")
        rows = []
        for start in range(0, len(cells), PICKER_COLUMNS):
            rows.append("   ".join(cells[start : start + PICKER_COLUMNS]))
        return rows

    def _render_month_picker(self, picker: MonthPickerRender, cursor: Optional[int]) -> List[str]:
        lines = [self._center(f"< {picker.year} >"), ""]
        labels = [f"[{m.label}]" if m.selected else f" {m.label} " for m in picker.months]
        lines.extend(self._render_picker_rows(labels, cursor))
        return lines

    def _render_year_picker(self, picker: YearPickerRender, cursor: Optional[int]) -> List[str]:
        lines = [self._center(f"<< {picker.label} >>"), ""]
        labels = []
        for option in picker.years:
            if option.selected:
                labels.append(f"[{option.year}]")
            elif not option.selectable:
                labels.append(f" {option.year}x")
            else:
                labels.append(f" {option.year} ")
        lines.extend(self._render_picker_rows(labels, cursor))
        return lines

    def _render_presets(self, snapshot: CalendarRender) -> str:
        parts = []
        for number, tab in enumerate(snapshot.presets, start=1):
            label = f"[{tab.label}]" if tab.selected else tab.label
            if tab.disabled:
                label = f"{label} (n/a)"
            prefix = ">" if tab.tabindex == 0 else " "
            parts.append(f"{prefix}{number}:{label}")
        return " ".join(parts)

    def clear_screen(self) -> bool:
        """Clear the console screen without going through a shell.

        Returns:
            True if screen was cleared successfully, False otherwise
        """
        try:
            if os.name == "posix":
                subprocess.run(["clear"], check=True, timeout=5)
            else:
                subprocess.run(["cmd.exe", "/c", "cls"], check=True, timeout=5)
            return True
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as e:
            logger.warning(f"Failed to clear screen: {e}")
            print("\n" * 50)
            return False

    def display_with_clear(self, content: str) -> None:
        """Display content after clearing screen.

        Args:
            content: Content to display
        """
        self.clear_screen()
        print(content)
        print()
