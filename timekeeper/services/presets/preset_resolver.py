"""Preset lookup and sequence routing"""
import json
import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError

from timekeeper.config import Settings
from timekeeper.models.preset import Preset
from .default_presets import DEFAULT_PRESETS

logger = logging.getLogger(__name__)

GROUP_MULTIPLIER_PATTERN = re.compile(r'\)x\d+')


class PresetResolver:
    """Maps preset names to sequence patterns"""

    def __init__(self, presets: Iterable[Preset]):
        self._presets: Dict[str, Preset] = {}
        for preset in presets:
            self._presets[preset.name] = preset

    def resolve(self, name_or_pattern: str) -> str:
        """
        Return the pattern of the preset named exactly `name_or_pattern`,
        or the input unchanged. Preset patterns are not resolved again.
        """
        preset = self._presets.get(name_or_pattern)
        if preset is not None:
            logger.debug(f"Resolved preset '{preset.name}' to '{preset.pattern}'")
            return preset.pattern
        return name_or_pattern

    def is_sequence_like(self, text: str) -> bool:
        """True for preset names and anything with groups or commas."""
        if text in self._presets:
            return True
        if "(" in text or "," in text:
            return True
        return GROUP_MULTIPLIER_PATTERN.search(text) is not None

    def get_preset(self, name: str) -> Optional[Preset]:
        return self._presets.get(name)

    def list_presets(self) -> List[Preset]:
        return list(self._presets.values())


def load_presets(presets_file: Optional[Path] = None) -> List[Preset]:
    """
    Built-in presets, overridden and extended by a JSON file when given.

    The file holds a list of {"name", "pattern", "description"} objects.
    An unreadable file is logged and ignored.
    """
    presets: Dict[str, Preset] = {p.name: p for p in DEFAULT_PRESETS}
    if presets_file is None or not presets_file.exists():
        return list(presets.values())

    try:
        raw = json.loads(presets_file.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise ValueError("presets file must contain a JSON list")
        for item in raw:
            preset = Preset.model_validate(item)
            presets[preset.name] = preset
    except (OSError, ValueError, ValidationError) as e:
        logger.warning(f"Ignoring presets file {presets_file}: {e}")
        return [p for p in DEFAULT_PRESETS]

    logger.info(f"Loaded presets from {presets_file}")
    return list(presets.values())


def build_preset_resolver(settings: Settings) -> PresetResolver:
    return PresetResolver(load_presets(settings.presets_file))
