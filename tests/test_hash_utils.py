from datetime import datetime, timedelta

from assembly_crawler.models.bill import Bill, BillStatus
from assembly_crawler.models.petition import Petition
from assembly_crawler.utils.hash_utils import compute_bill_hash, compute_petition_hash


def _make_bill(number: str, name: str) -> Bill:
    """Helper to create a minimal Bill instance for hashing tests."""
    return Bill(
        bill_number=number,
        bill_name=name,
        notice_start=datetime(2024, 3, 1),
        notice_end=datetime(2024, 3, 15),
        source_url=f"https://pal.test/view.do?lgsltPaId={number}",
        last_fetched_at=datetime(2024, 3, 1, 9, 0),
    )


def _make_petition(agree_count: int, content: str = "본문") -> Petition:
    return Petition(
        petition_id="ABC123",
        title="청원",
        content=content,
        agree_count=agree_count,
        start_date=datetime(2024, 3, 1),
        end_date=datetime(2024, 3, 31),
        source_url="https://petitions.test/proceed/onGoingAll/ABC123",
    )


def test_compute_bill_hash_ignores_fetch_metadata() -> None:
    base_bill = _make_bill("PRC_1", "지방자치법 일부개정법률안")
    refetched = base_bill.model_copy(update={
        "last_fetched_at": base_bill.last_fetched_at + timedelta(days=1),
        "status": BillStatus.ENDED,
    })

    assert compute_bill_hash(base_bill) == compute_bill_hash(refetched)


def test_compute_bill_hash_detects_content_changes() -> None:
    bill_a = _make_bill("PRC_2", "원래 제목")
    bill_b = _make_bill("PRC_2", "바뀐 제목")

    assert compute_bill_hash(bill_a) != compute_bill_hash(bill_b)


def test_compute_petition_hash_tracks_agree_count() -> None:
    assert compute_petition_hash(_make_petition(10)) != compute_petition_hash(_make_petition(11))


def test_compute_petition_hash_ignores_insert_only_fields() -> None:
    assert compute_petition_hash(_make_petition(10, "A")) == compute_petition_hash(_make_petition(10, "B"))
