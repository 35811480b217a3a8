"""Serialization of engine results for presentation and summary collaborators."""

import inspect
from dataclasses import asdict, fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from loan_ledger.engine.metrics import RoleScopedMetrics


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return obj
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def report_to_dict(obj: Any) -> Any:
    """Serialize a result tree including the derived properties of each dataclass.

    Unlike :func:`to_dict`, properties such as ``net_profit`` and ``idle``
    are emitted next to the fields.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        result = {f.name: report_to_dict(getattr(obj, f.name)) for f in fields(obj)}
        for name, attr in inspect.getmembers(type(obj)):
            if isinstance(attr, property):
                result[name] = report_to_dict(getattr(obj, name))
        return result
    elif isinstance(obj, (list, tuple)):
        return [report_to_dict(v) for v in obj]
    elif isinstance(obj, dict):
        return {k: report_to_dict(v) for k, v in obj.items()}
    return serialize_value(obj)


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple, frozenset, set)):
        return [serialize_value(v) for v in value]
    return value


def summary_payload(metrics: RoleScopedMetrics) -> dict[str, Any]:
    """Flatten a dashboard snapshot into plain fields for text summarization.

    Only numbers and strings are emitted, so the consumer needs no knowledge
    of the engine's types.
    """
    payload: dict[str, Any] = {
        "user_role": metrics.role.value,
        "evaluation_date": metrics.evaluation_date.isoformat(),
    }

    if metrics.admin is not None:
        admin = metrics.admin
        payload.update(
            {
                "total_users_count": admin.total_users_count,
                "active_managers_count": admin.active_managers_count,
                "pending_activations_count": admin.pending_managers_count,
                "total_capital_in_system": float(admin.total_capital),
                "idle_capital": float(admin.idle_installment_capital + admin.idle_grace_capital),
                "total_active_loans_count": admin.total_active_loans,
            }
        )

    if metrics.manager is not None:
        manager = metrics.manager
        payload.update(
            {
                "borrowers_count": manager.borrowers_count,
                "investors_count": manager.investors_count,
                "pending_requests_count": manager.pending_requests_count,
                "total_loans_granted": float(manager.loans_granted),
                "total_net_profit": float(manager.net_profit),
                "defaulted_loans_count": manager.defaulted_loans_count,
                "active_capital": float(manager.capital.active),
                "idle_capital": float(manager.idle_funds.total_idle_funds),
                "total_capital_in_system": float(manager.capital.total),
            }
        )

    if metrics.investor is not None:
        investor = metrics.investor
        payload.update(
            {
                "total_capital_in_system": float(investor.total_capital),
                "defaulted_funds": float(investor.total_defaulted),
                "active_investors_count": investor.active_investors_count,
                "total_investors_count": investor.total_investors_count,
            }
        )
        if investor.own is not None:
            payload.update(
                {
                    "active_capital": float(investor.own.active_capital),
                    "idle_capital": float(investor.own.idle_capital),
                    "expected_profit": float(investor.own.expected_profit),
                }
            )

    return payload
