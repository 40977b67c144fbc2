"""CSV import utilities to load data into database."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
from sqlalchemy.orm import Session

from careplan.domain.models import ActivityTemplate, Child, Staff
from careplan.services.constraints import validate_template_duration


def _read_normalized(csv_path: str | Path, required: list[str]) -> pd.DataFrame:
    df = pd.read_csv(csv_path)
    df.columns = df.columns.str.lower().str.strip()
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{csv_path}: missing required column(s): {', '.join(missing)}")
    return df


def _optional_str(row: pd.Series, column: str) -> str | None:
    value = row.get(column)
    return str(value) if pd.notna(value) else None


def import_children_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import child profiles from CSV (columns: name, birth_date?, notes?).

    Returns:
        Number of children imported
    """
    df = _read_normalized(csv_path, ["name"])
    df["name"] = df["name"].astype(str).str.strip()

    children = [
        Child(name=row["name"], birth_date=_optional_str(row, "birth_date"), notes=_optional_str(row, "notes"))
        for _, row in df.iterrows()
    ]
    session.add_all(children)
    session.commit()

    print(f"[INFO] Imported {len(children)} children from {csv_path}")
    return len(children)


def import_staff_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import staff from CSV (columns: name, role?).

    Row order is preserved, which becomes allocation priority order.
    """
    df = _read_normalized(csv_path, ["name"])
    df["name"] = df["name"].astype(str).str.strip()

    staff = [Staff(name=row["name"], role=_optional_str(row, "role")) for _, row in df.iterrows()]
    # Added one at a time so ids follow file order
    for member in staff:
        session.add(member)
        session.flush()
    session.commit()

    print(f"[INFO] Imported {len(staff)} staff from {csv_path}")
    return len(staff)


def import_templates_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import activity templates from CSV (columns: title, duration_mins, description?).

    Raises:
        ValueError: If any duration is not a positive integer
    """
    df = _read_normalized(csv_path, ["title", "duration_mins"])
    df["duration_mins"] = pd.to_numeric(df["duration_mins"], errors="coerce")
    if df["duration_mins"].isna().any():
        raise ValueError(f"{csv_path}: duration_mins must be numeric")

    templates = []
    for _, row in df.iterrows():
        templates.append(
            ActivityTemplate(
                title=str(row["title"]).strip(),
                duration_mins=validate_template_duration(int(row["duration_mins"])),
                description=_optional_str(row, "description"),
            )
        )
    for template in templates:
        session.add(template)
        session.flush()
    session.commit()

    print(f"[INFO] Imported {len(templates)} activity templates from {csv_path}")
    return len(templates)
