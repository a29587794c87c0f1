from datetime import datetime, timedelta

import pytest
from sqlalchemy import Text

from assembly_crawler.db.filters import BillFilter, PetitionFilter
from assembly_crawler.db.models import BillModel, PetitionModel
from assembly_crawler.db.repositories import BillRepository, PetitionRepository
from assembly_crawler.models.bill import Bill, BillStatus, ProposerType
from assembly_crawler.models.crawl import PersistenceStatus
from assembly_crawler.models.petition import Petition

NOW = datetime(2024, 3, 10, 12, 0, 0)


def _make_bill(number: str, **overrides) -> Bill:
    fields = dict(
        bill_number=number,
        bill_name=f"{number} 일부개정법률안",
        proposer_type=ProposerType.MEMBER,
        proposer="홍길동의원 등 10인",
        committee="행정안전위원회",
        proposal_reason="제안이유",
        main_content="제안이유 및 주요내용",
        notice_start=datetime(2024, 3, 1),
        notice_end=datetime(2024, 3, 15),
        source_url=f"https://pal.test/view.do?lgsltPaId={number}",
    )
    fields.update(overrides)
    return Bill(**fields)


def _make_petition(petition_id: str, agree_count: int, **overrides) -> Petition:
    fields = dict(
        petition_id=petition_id,
        category="교육",
        title=f"{petition_id} 청원",
        agree_count=agree_count,
        start_date=datetime(2024, 3, 1),
        end_date=datetime(2024, 3, 31),
        source_url=f"https://petitions.test/proceed/onGoingAll/{petition_id}",
    )
    fields.update(overrides)
    return Petition(**fields)


async def test_bill_upsert_is_idempotent(database) -> None:
    bill = _make_bill("PRC_1")

    async with database.session() as session:
        first = await BillRepository(session).upsert(bill)
    async with database.session() as session:
        second = await BillRepository(session).upsert(bill)
    async with database.session() as session:
        repo = BillRepository(session)
        count = await repo.count_where()
        stored = await repo.get_by_key("PRC_1")

    assert first.status == PersistenceStatus.CREATED
    assert second.status == PersistenceStatus.UNCHANGED
    assert second.record_id == first.record_id
    assert count == 1
    assert stored == bill.model_copy(update={"last_fetched_at": stored.last_fetched_at})


async def test_bill_recrawl_updates_fields_and_reopens(database) -> None:
    async with database.session() as session:
        repo = BillRepository(session)
        await repo.upsert(_make_bill("PRC_1", notice_end=datetime(2024, 3, 5)))
        assert await repo.mark_ended(NOW) == 1

    async with database.session() as session:
        outcome = await BillRepository(session).upsert(
            _make_bill("PRC_1", bill_name="바뀐 제목", notice_end=datetime(2024, 3, 5))
        )

    async with database.session() as session:
        stored = await BillRepository(session).get_by_key("PRC_1")

    assert outcome.status == PersistenceStatus.UPDATED
    assert stored.bill_name == "바뀐 제목"
    assert stored.status == BillStatus.IN_PROGRESS


async def test_bill_get_by_key_missing(database) -> None:
    async with database.session() as session:
        assert await BillRepository(session).get_by_key("nope") is None


async def test_bill_filters(database) -> None:
    async with database.session() as session:
        repo = BillRepository(session)
        await repo.upsert(_make_bill("PRC_1", notice_end=datetime(2024, 3, 20)))
        await repo.upsert(_make_bill(
            "PRC_2",
            proposer="정부",
            proposer_type=ProposerType.GOVERNMENT,
            committee="기획재정위원회",
            notice_end=datetime(2024, 3, 12),
        ))
        await repo.upsert(_make_bill("PRC_3", bill_name="국민연금법 일부개정법률안", notice_end=datetime(2024, 3, 14)))

    async with database.session() as session:
        repo = BillRepository(session)

        government = await repo.find_where(BillFilter(proposer_type=ProposerType.GOVERNMENT))
        committee_count = await repo.count_where(BillFilter(committee="행정안전위원회"))
        closing_soon = await repo.find_where(BillFilter(notice_end_before=datetime(2024, 3, 15)))
        searched = await repo.find_where(BillFilter(search="국민연금"))
        page = await repo.find_where(limit=1, offset=1)

    assert [b.bill_number for b in government] == ["PRC_2"]
    assert committee_count == 2
    assert [b.bill_number for b in closing_soon] == ["PRC_2", "PRC_3"]
    assert [b.bill_number for b in searched] == ["PRC_3"]
    assert [b.bill_number for b in page] == ["PRC_3"]


async def test_bill_mark_ended_only_touches_expired(database) -> None:
    async with database.session() as session:
        repo = BillRepository(session)
        await repo.upsert(_make_bill("OLD", notice_end=datetime(2024, 3, 9)))
        await repo.upsert(_make_bill("NEW", notice_end=datetime(2024, 3, 11)))

    async with database.session() as session:
        ended = await BillRepository(session).mark_ended(NOW)

    async with database.session() as session:
        repo = BillRepository(session)
        in_progress = await repo.count_where(BillFilter(status=BillStatus.IN_PROGRESS))
        old = await repo.get_by_key("OLD")

    assert ended == 1
    assert in_progress == 1
    assert old.status == BillStatus.ENDED


async def test_petition_creation_appends_no_history(database) -> None:
    async with database.session() as session:
        outcome = await PetitionRepository(session).upsert(_make_petition("P1", 100))

    async with database.session() as session:
        history = await PetitionRepository(session).history("P1")

    assert outcome.status == PersistenceStatus.CREATED
    assert outcome.history_appended is False
    assert outcome.previous_agree_count is None
    assert history == []


async def test_petition_count_change_appends_one_history_point(database) -> None:
    async with database.session() as session:
        await PetitionRepository(session).upsert(_make_petition("P1", 100))

    async with database.session() as session:
        unchanged = await PetitionRepository(session).upsert(_make_petition("P1", 100))

    async with database.session() as session:
        changed = await PetitionRepository(session).upsert(_make_petition("P1", 150))

    async with database.session() as session:
        repo = PetitionRepository(session)
        history = await repo.history("P1")
        stored = await repo.get_by_key("P1")

    assert unchanged.status == PersistenceStatus.UNCHANGED
    assert unchanged.history_appended is False
    assert changed.status == PersistenceStatus.UPDATED
    assert changed.history_appended is True
    assert changed.previous_agree_count == 100
    assert [point.agree_count for point in history] == [150]
    assert stored.agree_count == 150
    assert stored.progress_rate == 150 / 50000 * 100


async def test_petition_update_keeps_insert_only_fields(database) -> None:
    async with database.session() as session:
        await PetitionRepository(session).upsert(_make_petition("P1", 10, content="원문"))

    later = _make_petition(
        "P1",
        20,
        title="수정된 제목",
        content="다른 본문",
        hashtags=["태그"],
        end_date=datetime(2024, 4, 30),
    )
    async with database.session() as session:
        await PetitionRepository(session).upsert(later)

    async with database.session() as session:
        stored = await PetitionRepository(session).get_by_key("P1")

    assert stored.title == "수정된 제목"
    assert stored.agree_count == 20
    assert stored.content == "원문"
    assert stored.hashtags == []
    assert stored.end_date == datetime(2024, 3, 31)


async def test_petition_append_history_and_unknown_owner(database) -> None:
    async with database.session() as session:
        repo = PetitionRepository(session)
        await repo.upsert(_make_petition("P1", 10))
        point = await repo.append_history("P1", 12, recorded_at=NOW)

    assert point.agree_count == 12
    assert point.recorded_at == NOW

    with pytest.raises(LookupError):
        async with database.session() as session:
            await PetitionRepository(session).append_history("missing", 1)


async def test_petition_filters_and_mark_ended(database) -> None:
    async with database.session() as session:
        repo = PetitionRepository(session)
        await repo.upsert(_make_petition("P1", 10, category="교육"))
        await repo.upsert(_make_petition("P2", 5000, category="환경", end_date=NOW - timedelta(days=1)))
        await repo.upsert(_make_petition("P3", 700, category="환경", title="미세먼지 대책 청원"))

    async with database.session() as session:
        repo = PetitionRepository(session)
        popular = await repo.find_where(PetitionFilter(min_agree_count=500))
        environment = await repo.count_where(PetitionFilter(category="환경"))
        searched = await repo.find_where(PetitionFilter(search="미세먼지"))
        ended = await repo.mark_ended(NOW)

    async with database.session() as session:
        still_open = await PetitionRepository(session).count_where(
            PetitionFilter(status=BillStatus.IN_PROGRESS)
        )

    assert [p.petition_id for p in popular] == ["P2", "P3"]
    assert environment == 2
    assert [p.petition_id for p in searched] == ["P3"]
    assert ended == 1
    assert still_open == 2


def test_scraped_free_text_columns_are_unbounded() -> None:
    assert isinstance(BillModel.__table__.c.proposer.type, Text)
    assert isinstance(BillModel.__table__.c.committee.type, Text)
    assert isinstance(PetitionModel.__table__.c.category.type, Text)


async def test_overlong_scraped_text_is_stored_whole(database) -> None:
    proposer = "홍길동의원 " * 60
    committee = "위원회" * 100

    async with database.session() as session:
        await BillRepository(session).upsert(_make_bill("PRC_LONG", proposer=proposer, committee=committee))
        await PetitionRepository(session).upsert(_make_petition("P_LONG", 1, category="분류" * 80))

    async with database.session() as session:
        bill = await BillRepository(session).get_by_key("PRC_LONG")
        petition = await PetitionRepository(session).get_by_key("P_LONG")

    assert bill.proposer == proposer
    assert bill.committee == committee
    assert petition.category == "분류" * 80
