
"""Board constants and tunable feel settings"""

# Fixed for competitive play; not exposed as tunables.
COLS, ROWS = 10, 20
HIDDEN_ROWS = 4

SPAWN_X, SPAWN_Y = 3, 0

# every spawn-state shape fits in its top two matrix rows
PREVIEW_ROWS = 2

CONFIG = {
    "CELL_SIZE": 28,
    "DAS_MS": 170,
    "ARR_MS": 50,
    "LOCK_DELAY_MS": 500,
    "UPDATE_HZ": 60,
    "PREVIEW_COUNT": 6,
    "SEED": None,
    "DATA_DIR": "~/.tetris",
}
