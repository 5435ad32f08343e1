# constants.py
"""
Application-level constants.

These values are static and do not change between animator instances.
They are fundamental to the application's framework, such as frame
pacing, the depth range of the field, or the default palettes that the
presets in `field_config` draw from.
"""

# Frame pacing
FPS = 60
# Synthetic milliseconds between frames when a host advances time itself.
FRAME_INTERVAL_MS = 1000.0 / FPS

# Window settings
# Landing and dashboard fill the current display.
# Presets with a surface_size (loading) always get a fixed-size window.
FULLSCREEN = True
WINDOW_SIZE = (1280, 720)
WINDOW_CAPTION = "Particle Field"

# --- Depth ---
# Particles live in z in [0, Z_MAX].
Z_MAX = 1000.0
# The perspective divide uses DEPTH_CONSTANT / (DEPTH_CONSTANT + z).
DEPTH_CONSTANT = 1000.0

# Viewports narrower than this use the compact particle count.
COMPACT_BREAKPOINT = 768

# --- Backgrounds (RGB) ---
DASHBOARD_BACKGROUND = (0, 0, 0)
LANDING_BACKGROUND = (15, 23, 42)      # Slate
LOADING_BACKGROUND = (30, 27, 75)      # Indigo

# Cyan used for landing page connections.
LANDING_EDGE_COLOR = (6, 182, 212)
CORE_WHITE = (255, 255, 255)

# --- Palettes ---
# Neon palette used by the dashboard background.
NEON_COLORS = [
    "#00D9FF",  # Cyan
    "#7B68EE",  # Slate Blue
    "#FF0080",  # Hot Pink
    "#00FF41",  # Matrix Green
    "#FFD700",  # Gold
    "#FF69B4",  # Pink
    "#00FFF7",  # Aqua
    "#9D00FF",  # Violet
]

# Reduced palette used by the landing page.
LANDING_COLORS = ["#00FF41", "#FF0080", "#7B68EE", "#00D9FF"]

# Hue wheel hsl(180 + i * 30, 100%, 60%) for i in 0..7, used by the loader.
HUE_WHEEL_COLORS = [
    "#33FFFF",
    "#3399FF",
    "#3333FF",
    "#9933FF",
    "#FF33FF",
    "#FF3399",
    "#FF3333",
    "#FF9933",
]

# Fixed drawing surface for the loading screen.
LOADING_SURFACE_SIZE = (400, 400)
