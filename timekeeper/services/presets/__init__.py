from .default_presets import DEFAULT_PRESETS
from .preset_resolver import PresetResolver, build_preset_resolver, load_presets

__all__ = ["DEFAULT_PRESETS", "PresetResolver", "build_preset_resolver", "load_presets"]
