# services/chart_selection.py
from typing import Iterable, List

from models.view_schemas import ChartKey
from services.errors import EmptyChartSelectionError


class ChartSelection:
    """Which evolution charts go into an export"""

    def __init__(self, available: Iterable[ChartKey]):
        self.available = [ChartKey(k) for k in available]
        self.selected = set()

    def toggle(self, key: ChartKey) -> None:
        key = ChartKey(key)
        if key not in self.available:
            raise ValueError(f"Chart '{key.value}' has no data for this student")
        if key in self.selected:
            self.selected.remove(key)
        else:
            self.selected.add(key)

    def select(self, keys: Iterable[ChartKey]) -> None:
        for key in keys:
            if ChartKey(key) not in self.selected:
                self.toggle(key)

    def select_all(self) -> None:
        self.selected = set(self.available)

    def deselect_all(self) -> None:
        self.selected = set()

    @property
    def can_confirm(self) -> bool:
        return len(self.selected) > 0

    def confirm(self) -> List[ChartKey]:
        if not self.can_confirm:
            raise EmptyChartSelectionError("Selecione pelo menos um gráfico")
        return [key for key in self.available if key in self.selected]
