
"""
pygame drawing of a session Snapshot.

- Static background (grid lines + panel frame) is pre-rendered once per Dims.
- Cell sprites are pre-rendered per color (solid + ghost outline) and blitted.
- HUD text surfaces are cached and re-rendered only when their value changes.
"""
from __future__ import annotations
import pygame
from typing import Dict, Optional, Sequence, Tuple
from tetris_layout import LINE_H, Dims
from tetris_config import COLS, PREVIEW_ROWS, ROWS
from tetris_piece import COLORS, SHAPES, PieceKind
from tetris_session import Snapshot


class RenderAssets:
    """Holds pre-rendered assets for fast blitting."""
    def __init__(self, dims: Dims, font: pygame.font.Font):
        self.dims = dims
        self.font = font
        self._make_static()
        self._make_cells()
        self._text: Dict[str, Tuple[str, pygame.Surface]] = {}

    # ---------- Static background (grid + panel) ----------
    def _make_static(self):
        d = self.dims
        self.bg = pygame.Surface((d.total_w, d.total_h))
        self.bg.fill((10, 13, 34))
        grid_col = (40, 50, 90)
        for x in range(COLS + 1):
            X = d.board_x + x * d.cell
            pygame.draw.line(self.bg, grid_col, (X, d.board_y), (X, d.board_y + d.board_h))
        for y in range(ROWS + 1):
            Y = d.board_y + y * d.cell
            pygame.draw.line(self.bg, grid_col, (d.board_x, Y), (d.board_x + d.board_w, Y))
        panel_rect = pygame.Rect(d.panel_x, d.panel_y, d.panel_w, d.board_h)
        pygame.draw.rect(self.bg, (21, 25, 53), panel_rect)
        pygame.draw.rect(self.bg, (50, 60, 100), panel_rect, 1)

    # ---------- Cell sprites (solid + ghost outline + dimmed) ----------
    def _make_cells(self):
        self.cell_surf: Dict[str, pygame.Surface] = {}
        self.ghost_surf: Dict[str, pygame.Surface] = {}
        c = self.dims.cell
        for color in COLORS.values():
            col = pygame.Color(color)
            s = pygame.Surface((c - 2, c - 2))
            s.fill(col)
            self.cell_surf[color] = s
            g = pygame.Surface((c - 8, c - 8), pygame.SRCALPHA)
            pygame.draw.rect(g, col, (0, 0, c - 8, c - 8), 2)
            self.ghost_surf[color] = g

    def _label(self, key: str, text: str, color=(200, 210, 240)) -> pygame.Surface:
        cached = self._text.get(key)
        if cached is None or cached[0] != text:
            cached = (text, self.font.render(text, True, color))
            self._text[key] = cached
        return cached[1]

    def _cell_pos(self, bx: int, by: int, inset: int) -> Tuple[int, int]:
        return (self.dims.board_x + bx * self.dims.cell + inset,
                self.dims.board_y + by * self.dims.cell + inset)

    def _mini(self, screen: pygame.Surface, kind: Optional[PieceKind], x: int, y: int,
              dim: bool = False):
        if kind is None:
            return
        pc = self.dims.preview_cell
        col = pygame.Color(COLORS[kind])
        if dim:
            col = col.lerp((60, 60, 60), 0.6)
        for r, row in enumerate(SHAPES[kind][0][:PREVIEW_ROWS]):
            for c, v in enumerate(row):
                if v:
                    pygame.draw.rect(screen, col, (x + c * pc + 1, y + r * pc + 1, pc - 2, pc - 2))

    # ---------- Full frame ----------
    def draw(self, screen: pygame.Surface, snap: Snapshot, progress: Optional[str] = None):
        """Draw the visible-area snapshot; rows must exclude the hidden band."""
        d = self.dims
        screen.blit(self.bg, (0, 0))

        for y, row in enumerate(snap.rows):
            for x, cell in enumerate(row):
                if cell.filled and cell.color in self.cell_surf:
                    screen.blit(self.cell_surf[cell.color], self._cell_pos(x, y, 1))

        if snap.kind is not None:
            color = COLORS[snap.kind]
            self._draw_cells(screen, snap.ghost, self.ghost_surf[color], 4)
            self._draw_cells(screen, snap.cells, self.cell_surf[color], 1)

        px = d.text_x
        s = snap.stats
        for y, (key, text) in zip(d.stat_ys, (
            ("score", f"Score: {s.score}"),
            ("level", f"Level: {s.level}"),
            ("lines", f"Lines: {s.lines}"),
            ("combo", f"Combo: {s.combo}" if s.combo else ""),
            ("b2b", "Back-to-Back" if s.back_to_back else ""),
        )):
            if text:
                screen.blit(self._label(key, text), (px, y))

        screen.blit(self._label("hold", "Hold:"), (px, d.hold_y))
        self._mini(screen, snap.held, px, d.hold_y + LINE_H, dim=snap.hold_used)
        screen.blit(self._label("next", "Next:"), (px, d.next_y))
        y = d.next_y + LINE_H
        for kind in snap.preview:
            self._mini(screen, kind, px, y)
            y += d.preview_step

        if progress:
            screen.blit(self._label("progress", progress), (px, d.footer_y))
        if snap.paused:
            self._center(screen, "PAUSED")
        if snap.game_over:
            self._center(screen, "GAME OVER  (R to restart)")

    def _draw_cells(self, screen: pygame.Surface, cells: Sequence[Tuple[int, int]],
                    surf: pygame.Surface, inset: int):
        for x, y in cells:
            if y >= 0:
                screen.blit(surf, self._cell_pos(x, y, inset))

    def _center(self, screen: pygame.Surface, text: str):
        d = self.dims
        msg = self._label("center:" + text, text, (255, 230, 230))
        rect = msg.get_rect(center=(d.board_x + d.board_w // 2, d.board_y + d.board_h // 2))
        screen.blit(msg, rect)
