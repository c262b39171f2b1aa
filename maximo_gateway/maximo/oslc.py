"""
OSLC query helpers: where-clause quoting, row extraction, and the quick
natural-language query mapping used by the chat UI's built-in prompts.
"""

import re
from dataclasses import dataclass
from typing import Any

_NUMERIC = re.compile(r"^\d+(\.\d+)?$")
_MAX_COLUMNS = 30


def quote_where_value(value: Any) -> str:
    """Quote a value for oslc.where: numbers bare, strings double-quoted."""
    text = "" if value is None else str(value).strip()
    if not text:
        return ""
    if _NUMERIC.match(text):
        return text
    escaped = text.replace('"', '\\"')
    return f'"{escaped}"'


def extract_rows(data: Any) -> list[dict]:
    """Rows live under "member", "rdfs:member", or "response.member"."""
    if not isinstance(data, dict):
        return []
    rows = data.get("member") or data.get("rdfs:member")
    if rows is None and isinstance(data.get("response"), dict):
        rows = data["response"].get("member")
    if not isinstance(rows, list):
        return []
    return [r for r in rows if isinstance(r, dict)]


@dataclass(frozen=True)
class OslcQuery:
    """One object-structure query."""

    object_structure: str
    where: str = ""
    select: str = ""
    order_by: str = ""
    page_size: str = ""

    def to_params(self) -> dict[str, str]:
        params = {
            "oslc.where": self.where,
            "oslc.select": self.select,
            "oslc.orderBy": self.order_by,
            "oslc.pageSize": self.page_size,
        }
        return {k: v for k, v in params.items() if v}

    @property
    def columns(self) -> list[str]:
        return [c.strip() for c in self.select.split(",") if c.strip()]


def _site_clause(site: str | None) -> str:
    return f"siteid={quote_where_value(site)}" if site else ""


def map_quick_query(text: str, site: str | None, object_structure: str) -> OslcQuery:
    """
    Map one of the built-in prompts to an OSLC query.

    Recognized: "show me all assets", "show me all locations", "open work orders".
    Anything else gets a small asset listing.
    """
    t = text.strip().lower()
    site = (site or "").strip().upper() or None

    if "show me all assets" in t or t == "show all assets":
        return OslcQuery(
            object_structure,
            where=_site_clause(site),
            select="assetnum,description,siteid,location,status,assettype,changedate",
            order_by="changedate desc",
            page_size="100",
        )
    if "show me all locations" in t or t == "show all locations":
        return OslcQuery(
            object_structure,
            where=_site_clause(site),
            select="location,description,siteid,type,status,changedate",
            order_by="changedate desc",
            page_size="100",
        )
    if "open work orders" in t:
        where = f"status={quote_where_value('WAPPR')}"
        if site:
            where += f" and {_site_clause(site)}"
        return OslcQuery(
            object_structure,
            where=where,
            select="wonum,description,status,siteid,assetnum,location,changedate",
            order_by="changedate desc",
            page_size="100",
        )
    return OslcQuery(
        object_structure,
        where=_site_clause(site),
        select="assetnum,description,siteid",
        page_size="50",
    )


def tabulate(rows: list[dict], columns: list[str]) -> tuple[list[str], list[dict]]:
    """Project rows onto columns (first row's keys when none are given)."""
    if not columns and rows:
        columns = list(rows[0].keys())
    cols = list(columns)[:_MAX_COLUMNS]
    table = [{c: row.get(c, "") for c in cols} for row in rows]
    return cols, table
