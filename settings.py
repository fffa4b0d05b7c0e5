# settings.py

# Window / display
TILE_SIZE = 16
PANEL_HEIGHT = 7  # rows of tiles below the map for HUD + messages
FPS = 30
TITLE = "Dungeon Crawler"

# Map
MAP_WIDTH = 80
MAP_HEIGHT = 43
WINDOW_WIDTH = MAP_WIDTH * TILE_SIZE
WINDOW_HEIGHT = (MAP_HEIGHT + PANEL_HEIGHT) * TILE_SIZE

# Rooms
ROOM_MAX_SIZE = 10
ROOM_MIN_SIZE = 6
MAX_ROOMS = 30

# Field of view
FOV_RADIUS = 10

# Player
PLAYER = 0  # roster index of the player
PLAYER_BASE_MAX_HP = 100
PLAYER_BASE_DEFENSE = 1
PLAYER_BASE_POWER = 2
INVENTORY_CAPACITY = 26

# Experience and level up
LEVEL_UP_BASE = 200
LEVEL_UP_FACTOR = 150
LEVEL_SCREEN_WIDTH = 40

# Spells and consumables
HEAL_AMOUNT = 40
LIGHTNING_DAMAGE = 40
LIGHTNING_RANGE = 5
CONFUSE_RANGE = 8
CONFUSE_NUM_TURNS = 10
FIREBALL_RADIUS = 3
FIREBALL_DAMAGE = 25

# Colors
COLOR_BG = (0, 0, 0)
COLOR_DARK_WALL = (0, 0, 100)
COLOR_LIGHT_WALL = (130, 110, 50)
COLOR_DARK_GROUND = (50, 50, 150)
COLOR_LIGHT_GROUND = (200, 180, 50)

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
RED = (255, 0, 0)
DARK_RED = (191, 0, 0)
LIGHT_RED = (255, 115, 115)
ORANGE = (255, 127, 0)
YELLOW = (255, 255, 0)
GREEN = (0, 255, 0)
LIGHT_GREEN = (115, 255, 115)
DESATURATED_GREEN = (63, 127, 63)
DARK_GREEN = (0, 191, 0)
VIOLET = (127, 0, 255)
LIGHT_VIOLET = (185, 115, 255)
LIGHT_CYAN = (115, 255, 255)
SKY = (0, 191, 255)
DARKER_ORANGE = (127, 63, 0)
SEPIA = (127, 101, 63)
BRASS = (191, 151, 96)
DARK_SEPIA = (94, 75, 47)
