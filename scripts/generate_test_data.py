#!/usr/bin/env python3
"""Generate a synthetic text dataset for the enrichment pipeline.

This script creates realistic-looking records using Faker and writes them
into local storage as an input dataset, together with a matching run input
under the ``INPUT`` key. The dataset deliberately contains the cases the
quality checks are meant to catch.

Generation logic
----------------
- Each record is a short paragraph of Faker sentences under ``text`` plus a
  ``label`` and a ``source`` field.
- With probability `pii_density` a record gets one PII value appended
  (email, phone, SSN or credit card), so the PII check has something to
  flag and redact.
- With probability `dup_rate` a record repeats an earlier record's text,
  sometimes upper-cased, so it should be flagged as a duplicate of that
  earlier record.
- A few records are too short, or are missing the text field entirely.

Usage
-----
python scripts/generate_test_data.py --storage-dir storage --n 200

Requirements
------------
pip install faker

"""

from __future__ import annotations

import argparse
import logging
import random
import string
import sys
from pathlib import Path
from typing import Dict, List, Optional

from faker import Faker

# ensure repo root on sys.path
repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from data_enricher.storage.local_store import LocalStorage  # noqa: E402
from data_enricher.core.config import AppConfig  # noqa: E402

log = logging.getLogger("generate_test_data")

fake = Faker("en_US")

LABELS = ["positive", "negative", "neutral"]


def _random_digits(n: int) -> str:
    return "".join(random.choice(string.digits) for _ in range(n))


def gen_ssn() -> str:
    return f"{_random_digits(3)}-{_random_digits(2)}-{_random_digits(4)}"


def gen_credit_card() -> str:
    # Simple 16-digit formatted CC
    return " ".join(_random_digits(4) for _ in range(4))


def gen_phone() -> str:
    return f"({_random_digits(3)}) {_random_digits(3)}-{_random_digits(4)}"


PII_GENERATORS = [
    ("email", lambda: fake.email()),
    ("phone", gen_phone),
    ("ssn", gen_ssn),
    ("credit_card", gen_credit_card),
]


def _variant(text: str) -> str:
    """Exact repeat or upper-cased copy; both count as the same text."""
    choice = random.random()
    if choice < 0.33:
        return text.upper()
    return text


def generate_records(
    n: int,
    pii_density: float = 0.15,
    dup_rate: float = 0.1,
    short_rate: float = 0.05,
    missing_rate: float = 0.02,
    seed: Optional[int] = None,
) -> List[Dict]:
    """Generate ``n`` raw input records.

    Args:
        n: number of records.
        pii_density: probability that a record embeds one PII value.
        dup_rate: probability that a record repeats an earlier text.
        short_rate: probability of a text shorter than the default minimum length.
        missing_rate: probability that the text field is left out.
        seed: optional random seed for reproducibility.
    """
    if seed is not None:
        random.seed(seed)
        Faker.seed(seed)

    records: List[Dict] = []
    texts: List[str] = []
    for _ in range(n):
        record: Dict = {"label": random.choice(LABELS), "source": fake.domain_name()}
        roll = random.random()
        if roll < missing_rate:
            records.append(record)
            continue
        if texts and roll < missing_rate + dup_rate:
            text = _variant(random.choice(texts))
        elif roll < missing_rate + dup_rate + short_rate:
            text = fake.word()
        else:
            text = fake.paragraph(nb_sentences=random.randint(2, 6))
            if random.random() < pii_density:
                _, gen = random.choice(PII_GENERATORS)
                text = f"{text} Reach me at {gen()}."
        texts.append(text)
        record["text"] = text
        records.append(record)
    return records


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--storage-dir", default="storage", help="Local storage root")
    parser.add_argument("--dataset", default="synthetic", help="Input dataset name")
    parser.add_argument("--n", type=int, default=100, help="Number of records")
    parser.add_argument("--pii-density", type=float, default=0.15)
    parser.add_argument("--dup-rate", type=float, default=0.1)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()
    AppConfig(storage_dir=args.storage_dir, logging={"log_file_path": None}).setup_logging()

    storage = LocalStorage(args.storage_dir)
    records = generate_records(args.n, pii_density=args.pii_density, dup_rate=args.dup_rate, seed=args.seed)
    written = storage.open_dataset(args.dataset).push_items(records)
    storage.open_key_value_store().set_value("INPUT", {"datasetId": args.dataset, "textField": "text"})

    log.info("Wrote %d records to dataset '%s' under %s", written, args.dataset, Path(args.storage_dir).resolve())


if __name__ == "__main__":
    main()
