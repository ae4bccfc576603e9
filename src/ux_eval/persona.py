"""
Persona presets and resolution.

A persona can be given as a preset id or key, as a partial set of numeric
overrides merged onto the default preset, or as a natural-language
description decomposed into the three numeric dimensions.
"""

import json
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Final

from loguru import logger
from pydantic import ValidationError
from slugify import slugify

from ux_eval.exceptions import InvalidInputError
from ux_eval.models import (
    CUSTOM_PERSONA_ID,
    CUSTOM_PERSONA_NAME,
    PersonaConfig,
    PersonaOverride,
)

PersonaInput = str | PersonaConfig | PersonaOverride | Mapping[str, Any]

# The first entry is the default persona used for fallbacks and merges.
PERSONA_PRESETS: Final[Mapping[str, PersonaConfig]] = MappingProxyType(
    {
        "XIAO_FANG": PersonaConfig(
            id="xiao_fang",
            name="Expert Developer (Xiao Fang)",
            human_think_time_ms=1000,
            persona_factor=1.2,
            expectation_bias=0.7,
            description="Highly skilled, impatient with delays, "
            "expects high performance.",
        ),
        "XIAO_DIU": PersonaConfig(
            id="xiao_diu",
            name="Novice PM (Xiao Diu)",
            human_think_time_ms=2000,
            persona_factor=0.8,
            expectation_bias=1.3,
            description="Learning phase, patient, needs time to read and understand.",
        ),
    }
)

DEFAULT_PRESET_KEY: Final = next(iter(PERSONA_PRESETS))


def default_persona() -> PersonaConfig:
    return PERSONA_PRESETS[DEFAULT_PRESET_KEY]


def resolve_persona(persona_input: PersonaInput) -> PersonaConfig:
    """
    Resolve any supported persona input into a complete `PersonaConfig`.

    - A string is looked up by exact preset id or case-insensitive preset key.
      Unknown strings fall back to the default preset (logged, not raised).
    - A `PersonaConfig`, `PersonaOverride` or mapping is merged field by field
      over the default preset. Missing `id`/`name` get placeholder values.

    Numeric ranges are not validated. Raises `InvalidInputError` only when an
    override cannot be interpreted at all (e.g. a non-numeric factor).
    """
    if isinstance(persona_input, str):
        logger.debug("Resolving persona input: {!r}", persona_input)
        return _resolve_preset(persona_input)

    override = _as_override(persona_input)
    logger.debug(
        "Resolving persona input: {}", override.model_dump_json(exclude_none=True)
    )
    return _merge_with_default(override)


def _resolve_preset(persona_id: str) -> PersonaConfig:
    for key, preset in PERSONA_PRESETS.items():
        if preset.id == persona_id or key == persona_id.upper():
            logger.debug("Found persona preset: {}", key)
            return preset

    fallback = default_persona()
    logger.warning(
        "Persona preset '{}' not found. Falling back to '{}'.",
        persona_id,
        fallback.id,
    )
    return fallback


def _as_override(persona_input: Any) -> PersonaOverride:
    if isinstance(persona_input, PersonaOverride):
        return persona_input
    if isinstance(persona_input, PersonaConfig):
        return PersonaOverride.model_validate(persona_input.model_dump())
    if isinstance(persona_input, Mapping):
        try:
            return PersonaOverride.model_validate(dict(persona_input))
        except ValidationError as e:
            raise InvalidInputError.from_validation_error("persona", e) from e
    raise InvalidInputError(
        f"Unsupported persona input of type {type(persona_input).__name__}"
    )


def _merge_with_default(override: PersonaOverride) -> PersonaConfig:
    logger.debug("Using custom persona config merged over '{}'", DEFAULT_PRESET_KEY)
    fields = override.model_dump(exclude_none=True)
    fields["id"] = override.id or CUSTOM_PERSONA_ID
    fields["name"] = override.name or CUSTOM_PERSONA_NAME
    return default_persona().model_copy(update=fields)


def parse_persona_argument(text: str) -> str | dict[str, Any]:
    """
    Interpret a raw command-line persona argument.

    Text that looks like a JSON object is decoded into a mapping of overrides;
    anything else (including JSON that fails to decode) is returned unchanged
    to be treated as a preset id.
    """
    if text.strip().startswith("{"):
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Persona argument is not valid JSON ({e}); using as id.")
            return text
        if isinstance(data, dict):
            return data
    return text


# --- Natural-language descriptions ---

# Each axis is checked rule by rule in table order; the first rule with a
# matching keyword wins. Latin keywords match on word boundaries, CJK keywords
# as substrings, so "unfamiliar" never reads as "familiar".
_NEUTRAL_THINK_TIME_MS: Final = 1500.0
_NEUTRAL_PERSONA_FACTOR: Final = 1.0
_NEUTRAL_EXPECTATION_BIAS: Final = 1.0

_THINK_TIME_RULES: Final[tuple[tuple[tuple[str, ...], float], ...]] = (
    (
        ("expert", "pro", "familiar", "fast", "wide knowledge",
         "专家", "熟练", "老手", "知识面广"),
        800.0,
    ),
    (("standard", "average", "普通", "一般"), 1500.0),
    (
        ("novice", "learning", "careful", "slow", "unfamiliar",
         "新手", "小白", "不熟悉", "谨慎"),
        2500.0,
    ),
)

_PERSONA_FACTOR_RULES: Final[tuple[tuple[tuple[str, ...], float], ...]] = (
    (
        ("grumpy", "impatient", "urgent", "stressed", "critical",
         "暴躁", "急躁", "不耐烦", "挑剔"),
        1.3,
    ),
    (("normal", "calm", "objective", "冷静", "客观"), 1.0),
    (
        ("patient", "casual", "forgiving", "fanboy",
         "耐心", "随和", "宽容", "粉丝"),
        0.8,
    ),
)

_EXPECTATION_BIAS_RULES: Final[tuple[tuple[tuple[str, ...], float], ...]] = (
    (
        ("demanding", "high standards", "expert", "benchmark",
         "苛刻", "高标准", "专家"),
        0.7,
    ),
    (("standard", "标准"), 1.0),
    (
        ("forgiving", "low expectations", "beta user", "宽容", "低预期", "内测"),
        1.3,
    ),
)


def _contains_keyword(text: str, keyword: str) -> bool:
    if keyword.isascii():
        return re.search(rf"\b{re.escape(keyword)}\b", text) is not None
    return keyword in text


def _match_axis(
    text: str,
    rules: tuple[tuple[tuple[str, ...], float], ...],
    neutral: float,
    axis: str,
) -> float:
    for keywords, value in rules:
        for keyword in keywords:
            if _contains_keyword(text, keyword):
                logger.debug(f"'{keyword}' sets {axis} = {value}")
                return value
    return neutral


def persona_from_description(description: str) -> PersonaConfig:
    """
    Decompose a natural-language persona description into numeric parameters.

    Three independent dimensions are read from the text:

    1. Cognitive speed (``human_think_time_ms``): experts think faster.
    2. Mood (``persona_factor``): a grumpy user feels waiting as more painful.
    3. Standards (``expectation_bias``): demanding users expect faster flows.

    For example "Industry Expert - Slightly Grumpy - Wide Knowledge" yields
    800 ms think time, a 1.3 persona factor and a 0.7 expectation bias.
    Dimensions with no matching keyword keep a neutral value.
    """
    text = description.strip().lower()
    logger.debug("Decomposing persona description: {!r}", description)

    return PersonaConfig(
        id=slugify(description, separator="_") or CUSTOM_PERSONA_ID,
        name=description.strip() or CUSTOM_PERSONA_NAME,
        human_think_time_ms=_match_axis(
            text, _THINK_TIME_RULES, _NEUTRAL_THINK_TIME_MS, "humanThinkTimeMs"
        ),
        persona_factor=_match_axis(
            text, _PERSONA_FACTOR_RULES, _NEUTRAL_PERSONA_FACTOR, "personaFactor"
        ),
        expectation_bias=_match_axis(
            text, _EXPECTATION_BIAS_RULES, _NEUTRAL_EXPECTATION_BIAS, "expectationBias"
        ),
        description=description.strip() or None,
    )
