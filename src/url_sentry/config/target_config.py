"""
Target configuration merger.

Resolves targets from raw configuration fragments. A defaults fragment is
resolved once into a base Target; every entry of the targets list is then
decoded into a TargetLayer and merged over that base, field by field.

The one subtle rule is follow_redirects: an explicit `false` in a target
must win over a `true` default, while an absent key must inherit the
default. Decoding into a TargetLayer keeps "absent" (None) and "false"
apart so the merge below can tell them apart.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional

from url_sentry.config.validators import format_email, is_valid_url, parse_duration
from url_sentry.domain import Target, TargetLayer, utc_now
from url_sentry.errors import (
    ConfigError,
    ConfigFormatError,
    EmailFormatError,
    FieldDecodeError,
    IntervalParseError,
    UrlFormatError,
)

# Module logger
logger = logging.getLogger(__name__)


def _raw_target_map(raw: Any) -> Dict[str, Any]:
    if not isinstance(raw, Mapping):
        raise ConfigFormatError(f"target is an unknown format: {type(raw).__name__}")
    for key in raw:
        if not isinstance(key, str):
            raise ConfigFormatError(f"target has a non-string key: {key!r}")
    return dict(raw)


def _decode_str(values: Dict[str, Any], key: str) -> Optional[str]:
    value = values.get(key)
    if value is None or isinstance(value, str):
        return value
    raise FieldDecodeError(key, f"expected a string, got {type(value).__name__}")


def _decode_bool(values: Dict[str, Any], key: str) -> Optional[bool]:
    value = values.get(key)
    if value is None or isinstance(value, bool):
        return value
    raise FieldDecodeError(key, f"expected a boolean, got {type(value).__name__}")


def _is_int(value: Any) -> bool:
    # bool is a subclass of int, but `true` is not a status code
    return isinstance(value, int) and not isinstance(value, bool)


def _decode_int_list(values: Dict[str, Any], key: str) -> Optional[List[int]]:
    value = values.get(key)
    if value is None:
        return None
    if _is_int(value):
        return [value]
    if isinstance(value, (list, tuple)) and all(_is_int(item) for item in value):
        return list(value)
    raise FieldDecodeError(key, f"expected a list of integers, got {value!r}")


def _decode_str_list(values: Dict[str, Any], key: str) -> Optional[List[str]]:
    value = values.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return list(value)
    raise FieldDecodeError(key, f"expected a string or a list of strings, got {value!r}")


def decode_layer(raw: Any) -> TargetLayer:
    """
    Decodes a raw configuration fragment into a TargetLayer.

    Args:
        raw: A key/value mapping as produced by the YAML loader.

    Returns:
        TargetLayer: The decoded fragment; absent keys are None.

    Raises:
        ConfigFormatError: If `raw` is not a mapping with string keys.
        FieldDecodeError: If a known key holds a value of the wrong type.
    """
    values = _raw_target_map(raw)
    return TargetLayer(
        name=_decode_str(values, "name"),
        url=_decode_str(values, "url"),
        interval=_decode_str(values, "interval"),
        follow_redirects=_decode_bool(values, "follow_redirects"),
        return_codes=_decode_int_list(values, "return_codes"),
        from_email=_decode_str(values, "from_email"),
        alert_email=_decode_str_list(values, "alert_email"),
    )


def _format_from_email(address: str, target_name: str) -> str:
    if not address:
        return ""
    try:
        return format_email(address)
    except EmailFormatError as err:
        raise EmailFormatError(f"error parsing from_email target={target_name}: {err}") from err


def _format_email_list(addresses: Iterable[str], target_name: str) -> List[str]:
    try:
        return [format_email(address) for address in addresses]
    except EmailFormatError as err:
        raise EmailFormatError(f"error parsing alert_email target={target_name}: {err}") from err


def _set_interval(target: Target) -> None:
    if not target.check_interval:
        return
    try:
        target.interval = parse_duration(target.check_interval)
    except (ValueError, OverflowError) as err:
        raise IntervalParseError(target.name, target.check_interval, str(err)) from err


def new_target(raw: Any) -> Target:
    """
    Resolves a base target (the defaults layer) from a raw fragment.

    Absent fields take their zero values, except follow_redirects which
    defaults to True. The first check is scheduled for the current second.

    Raises:
        ConfigError: If the fragment cannot be decoded or validated.
    """
    layer = decode_layer(raw)
    name = layer.name or ""
    target = Target(
        name=name,
        url=layer.url or "",
        check_interval=layer.interval or "",
        follow_redirects=True if layer.follow_redirects is None else layer.follow_redirects,
        return_codes=list(layer.return_codes or []),
        from_email=_format_from_email(layer.from_email or "", name),
        alert_email_list=_format_email_list(layer.alert_email or [], name),
        next_check_time=utc_now().replace(microsecond=0),
        current_state=True,
    )
    _set_interval(target)
    return target


def spawn_target(base: Target, raw: Any) -> Target:
    """
    Creates a new target from a raw fragment, with missing fields taken from `base`.

    Scalars in the fragment win when non-empty, lists replace the base list
    when present and follow_redirects wins whenever its key is present.

    Args:
        base: The resolved parent target, usually the defaults.
        raw: The raw override fragment of a single target.

    Returns:
        Target: The resolved target, due for its first check immediately.

    Raises:
        ConfigError: If the fragment cannot be decoded or the result is invalid.
    """
    layer = decode_layer(raw)
    name = layer.name or base.name

    if layer.alert_email is not None:
        alert_email_list = _format_email_list(layer.alert_email, name)
    else:
        alert_email_list = list(base.alert_email_list)

    target = Target(
        name=name,
        url=layer.url or base.url,
        check_interval=layer.interval or base.check_interval,
        follow_redirects=(
            base.follow_redirects if layer.follow_redirects is None else layer.follow_redirects
        ),
        return_codes=list(
            layer.return_codes if layer.return_codes is not None else base.return_codes
        ),
        from_email=_format_from_email(layer.from_email, name) if layer.from_email else base.from_email,
        alert_email_list=alert_email_list,
        next_check_time=utc_now(),
        current_state=True,
    )

    if not target.url:
        raise UrlFormatError(f"missing url for target={name}")
    if not is_valid_url(target.url):
        raise UrlFormatError(f"url not valid for target={name}: {target.url!r}")

    _set_interval(target)
    return target


def resolve_target(defaults_raw: Any, target_raw: Any) -> Target:
    """Resolves one target by layering its raw fragment over the raw defaults."""
    return spawn_target(new_target(defaults_raw), target_raw)


def build_targets(raw_targets: Iterable[Any], raw_defaults: Any) -> List[Target]:
    """
    Resolves every target of the configuration.

    The defaults are resolved once and used as the base of every entry. An
    entry that fails to resolve is logged and skipped so that the remaining
    targets are still monitored.

    Args:
        raw_targets: The raw entries of the `targets` list.
        raw_defaults: The raw `defaults` fragment.

    Returns:
        List[Target]: The successfully resolved targets, in config order.

    Raises:
        ConfigError: If the defaults themselves are invalid.
    """
    try:
        default_target = new_target(raw_defaults)
    except ConfigError as err:
        logger.error(f"default values invalid - {err}")
        raise

    targets: List[Target] = []
    for index, raw_target in enumerate(raw_targets):
        try:
            targets.append(spawn_target(default_target, raw_target))
        except ConfigError as err:
            logger.error(f"invalid values for target={index}: {err}")
    return targets
