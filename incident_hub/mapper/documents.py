from typing import Any, Dict, Optional


def with_id(doc: Optional[dict]) -> Optional[Dict[str, Any]]:
    """
    Copy a mongo document, exposing `_id` as `id`.
    Returns None for a missing document so callers can 404 on it.
    """
    if doc is None:
        return None
    out = dict(doc)
    if "_id" in out:
        out["id"] = str(out.pop("_id"))
    return out


def to_report_out(doc: dict, reporter_name: Optional[str] = None) -> Dict[str, Any]:
    out = with_id(doc)
    # older rows may carry null instead of an empty list
    out["photo_urls"] = list(out.get("photo_urls") or [])
    out["location_string"] = out.get("location_string") or ""
    if reporter_name is not None:
        out["reporter_name"] = reporter_name
    return out


def to_report_summary(doc: Optional[dict]) -> Optional[Dict[str, Any]]:
    if doc is None:
        return None
    return {
        "id": str(doc["_id"]),
        "location_string": doc.get("location_string"),
        "description": doc.get("description", ""),
        "status": doc.get("status", "pending"),
        "created_at": doc.get("created_at"),
        "profile_id": doc.get("profile_id"),
    }


def to_transaction_out(doc: dict, report_doc: Optional[dict] = None) -> Dict[str, Any]:
    out = with_id(doc)
    out["amount"] = float(out.get("amount") or 0)
    out["transaction_verified"] = bool(out.get("transaction_verified", False))
    out["report"] = to_report_summary(report_doc)
    return out
