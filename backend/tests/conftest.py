"""
Shared pytest fixtures for the profiling engine test suite.
"""

import os

# Keep test runs from writing rotating log files
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest

from core.dataset import Dataset


@pytest.fixture
def insurance_dataset() -> Dataset:
    """Small insurance-style dataset with every domain role present."""
    headers = ["customer_age", "annual_premium", "claim_amount", "region", "gender", "policy_type"]
    records = [
        {"customer_age": "25", "annual_premium": "1200", "claim_amount": "0", "region": "CA", "gender": "F", "policy_type": "Basic"},
        {"customer_age": "35", "annual_premium": "1500", "claim_amount": "500", "region": "CA", "gender": "M", "policy_type": "Plus"},
        {"customer_age": "45", "annual_premium": "0", "claim_amount": "0", "region": "NY", "gender": "F", "policy_type": "Basic"},
        {"customer_age": "55", "annual_premium": "1800", "claim_amount": "1500", "region": "CA", "gender": "M", "policy_type": "Premium"},
        {"customer_age": "40", "annual_premium": "1300", "claim_amount": "-20", "region": "TX", "gender": "F", "policy_type": "Plus"},
    ]
    return Dataset.from_records(headers, records)


@pytest.fixture
def sample_csv_bytes() -> bytes:
    return b"""id,name,value,date
1,Alice,100.5,2024-01-01
2,Bob,200.0,2024-01-02
3,Charlie,150.75,2024-01-03
4,Diana,175.25,2024-01-04
5,Eve,125.0,2024-01-05"""
