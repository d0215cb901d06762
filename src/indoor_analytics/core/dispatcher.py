"""選択中の可視化タイプを系統ごとの描画クラスへ振り分ける。"""

from __future__ import annotations

import logging
from typing import Optional, Union

from matplotlib.axes import Axes

from .filters import FilterSnapshot
from .modes import Family, VisualizationMode, family_of, first_mode_of
from .spatial import SpatialRenderer
from .statistical import StatisticalRenderer


class ModeDispatcher:
    def __init__(
        self,
        spatial: Optional[SpatialRenderer] = None,
        statistical: Optional[StatisticalRenderer] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.spatial = spatial or SpatialRenderer()
        self.statistical = statistical or StatisticalRenderer()
        self.logger = logger or logging.getLogger(__name__)

    def render(self, mode: Union[VisualizationMode, str], snapshot: FilterSnapshot, ax: Optional[Axes]):
        """系統に応じて描画する。未分類のタグは何も描かず None を返す。"""
        family = family_of(mode)
        if family is Family.SPATIAL:
            return self.spatial.render(mode, snapshot, ax)
        if family is Family.STATISTICAL:
            return self.statistical.render(mode, snapshot, ax)
        self.logger.debug("unknown visualization mode=%r; nothing rendered", mode)
        return None


class ModeSelection:
    """選択中の可視化タイプ。系統はモードから導出する。

    系統（タブ）を切り替えると、その系統の先頭モードが選ばれる。
    """

    def __init__(
        self,
        mode: VisualizationMode = VisualizationMode.HEATMAP,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.mode = VisualizationMode(mode)
        self.logger = logger or logging.getLogger(__name__)

    @property
    def family(self) -> Family:
        return family_of(self.mode)

    def select(self, mode: Union[VisualizationMode, str]) -> bool:
        if family_of(mode) is None:
            self.logger.warning("ignored unknown visualization mode=%r", mode)
            return False
        self.mode = VisualizationMode(mode)
        return True

    def switch_family(self, family: Union[Family, str]) -> VisualizationMode:
        self.mode = first_mode_of(Family(family))
        return self.mode
