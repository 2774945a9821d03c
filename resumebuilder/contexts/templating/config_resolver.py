"""
Style Preset Resolution for Templates

Applies named global-style presets to a template definition. Presets are
composable and can override each other, allowing flexible combination of
colors, typography and spacing.

Examples:
    # Apply multiple presets (later overrides earlier)
    >>> apply_style_presets(template, ["colors_slate", "typography_serif"])

    # Mix base preset with override
    >>> apply_style_presets(template, ["spacing_compact", "spacing_relaxed"])
"""

import os
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Dict, List

from dotenv import load_dotenv
from omegaconf import OmegaConf

from resumebuilder.contexts.templating.template_data_structures import GlobalStyles, TemplateDefinition

load_dotenv()
STYLE_PRESETS_PATH = Path(
    os.getenv("STYLE_PRESETS_PATH", Path(__file__).parent / "presets/style_presets.yaml")
)


def load_style_presets(config_path: Path = None) -> Dict[str, Dict[str, Any]]:
    """
    Load style_presets.yaml and flatten to a single-level dict.

    Collapses nested structure: colors.slate -> colors_slate

    Args:
        config_path: Optional path to config file (defaults to STYLE_PRESETS_PATH)

    Returns:
        Flattened dict mapping preset names to global style overrides
        Example: {"colors_slate": {"primary_color": "#334155", ...}}
    """
    if config_path is None:
        config_path = STYLE_PRESETS_PATH

    nested = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)

    # Flatten: category.name -> category_name
    flattened = {}
    for category, presets in nested.items():
        for name, config in presets.items():
            flattened[f"{category}_{name}"] = config

    return flattened


def apply_style_presets(
    template: TemplateDefinition,
    preset_names: List[str],
    config_path: Path = None,
) -> TemplateDefinition:
    """
    Apply named style presets to a template's global styles.

    Presets are applied in order, with later presets overriding earlier ones.
    Each preset's keys must be GlobalStyles attributes.

    Args:
        template: Template to update (modified in place)
        preset_names: Preset names to apply (e.g., ["colors_slate", "spacing_compact"])
        config_path: Optional path to style_presets.yaml (defaults to STYLE_PRESETS_PATH)

    Returns:
        The same template, with presets applied

    Raises:
        ValueError: If a preset is not found or sets an unknown style key
    """
    presets_dict = load_style_presets(config_path)
    valid_keys = {f.name for f in fields(GlobalStyles)}

    for preset_name in preset_names:
        if preset_name not in presets_dict:
            available = list(presets_dict.keys())
            raise ValueError(f"Preset '{preset_name}' not found. Available presets: {available}")

        preset_config = presets_dict[preset_name]
        unknown = sorted(set(preset_config) - valid_keys)
        if unknown:
            raise ValueError(f"Preset '{preset_name}' sets unknown style keys: {unknown}")

        # Later presets override earlier ones
        template.global_styles = replace(template.global_styles, **preset_config)

    return template
