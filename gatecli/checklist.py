"""Completeness check of provider params required for LDAP group lookup"""

from typing import Callable, List, Mapping, Sequence

from gatecli.constants import GROUP_LOOKUP_PARAMS


def missing_params(
    params: Mapping[str, str], required: Sequence[str] = GROUP_LOOKUP_PARAMS
) -> List[str]:
    """Required keys absent from params, in checklist order (duplicates kept)."""
    return [key for key in required if params.get(key) is None]


def report_missing_params(
    params: Mapping[str, str],
    emit: Callable[[str], None],
    required: Sequence[str] = GROUP_LOOKUP_PARAMS,
) -> bool:
    """
    Emit one line per missing required key.

    Every key is checked; a missing key never stops the check.

    Args:
        params: Provider params
        emit: Receives each diagnostic line
        required: Ordered checklist of keys

    Returns:
        True if any key was missing
    """
    missing = missing_params(params, required)
    for key in missing:
        emit(f"Error: {key} is not present in topology")
    return bool(missing)
