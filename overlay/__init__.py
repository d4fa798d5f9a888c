# Overlay: topology tables, draw recipes, surfaces, renderer

from overlay.recipes import OVERLAY_SPECS, OverlaySpec
from overlay.renderer import OverlayRenderer
from overlay.surface import CvSurface, DrawingSurface

__all__ = ["CvSurface", "DrawingSurface", "OVERLAY_SPECS", "OverlayRenderer", "OverlaySpec"]
