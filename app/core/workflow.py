# app/core/workflow.py
"""Rules for editing a project's ordered status workflow"""
from typing import Iterable, List, Sequence


def find_invalid_codes(requested: Sequence[str], catalog: Iterable[str]) -> List[str]:
    """
    Every requested code missing from the status catalog.

    All offenders are reported, each once, in the order first requested.
    """
    known = set(catalog)
    invalid: List[str] = []
    for code in requested:
        if code not in known and code not in invalid:
            invalid.append(code)
    return invalid


def removed_statuses(current: Sequence[str], requested: Sequence[str]) -> List[str]:
    """Codes present in the current workflow but absent from the requested one, in current order"""
    keep = set(requested)
    removed: List[str] = []
    for code in current:
        if code not in keep and code not in removed:
            removed.append(code)
    return removed


def status_in_use_message(code: str) -> str:
    return f"Cannot remove status '{code}' because tasks exist with this status"
