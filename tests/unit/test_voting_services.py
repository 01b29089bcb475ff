"""
Unit tests for voting services: centers, tables, voters, table members
and vote intentions.
"""

import pytest

from src.adapters.repository.memory import MemoryRecordStore
from src.domain.exceptions import Conflict, NotFound
from src.domain.voting import (
    TableMemberService,
    VoteIntentionService,
    VoterService,
    VotingCenterService,
    VotingTableService,
)


@pytest.fixture
def seeded(store: MemoryRecordStore) -> dict[str, int]:
    """One account, center, table, group, candidate and election."""
    with store.transaction() as session:
        user = session.insert("users", {"name": "Juan", "email": "juan@x.pe"})
        other = session.insert("users", {"name": "Ana", "email": "ana@x.pe"})
        center = session.insert("voting_centers", {"name": "IE 1234", "address": "Av. Lima 100"})
        table = session.insert("voting_tables", {"code": "000123", "voting_center_id": center["id"]})
        group = session.insert("political_groups", {"name": "Partido Uno"})
        candidate = session.insert(
            "candidates", {"full_name": "Candidata", "office": "PRESIDENT", "political_group_id": group["id"]}
        )
        second = session.insert(
            "candidates", {"full_name": "Candidato", "office": "CONGRESS", "political_group_id": group["id"]}
        )
        election = session.insert("elections", {"name": "EG 2026", "type": "GENERAL", "date": None})
    return {
        "user": user["id"],
        "other": other["id"],
        "center": center["id"],
        "table": table["id"],
        "candidate": candidate["id"],
        "second_candidate": second["id"],
        "election": election["id"],
    }


class TestVoterService:
    """Tests for voter profiles."""

    def test_create_embeds_account_and_table(self, store: MemoryRecordStore, seeded: dict) -> None:
        voter = VoterService(store).create(
            {"user_id": seeded["user"], "document_number": "12345678", "voting_table_id": seeded["table"]}
        )

        assert voter["user"]["email"] == "juan@x.pe"
        assert voter["voting_table"]["voting_center"]["name"] == "IE 1234"

    def test_unknown_account_raises_not_found(self, store: MemoryRecordStore, seeded: dict) -> None:
        with pytest.raises(NotFound):
            VoterService(store).create({"user_id": 99, "document_number": "12345678"})

    def test_second_profile_for_account_raises_conflict(self, store: MemoryRecordStore, seeded: dict) -> None:
        service = VoterService(store)
        service.create({"user_id": seeded["user"], "document_number": "12345678"})

        with pytest.raises(Conflict):
            service.create({"user_id": seeded["user"], "document_number": "87654321"})

    def test_duplicate_document_raises_conflict(self, store: MemoryRecordStore, seeded: dict) -> None:
        service = VoterService(store)
        service.create({"user_id": seeded["user"], "document_number": "12345678"})

        with pytest.raises(Conflict):
            service.create({"user_id": seeded["other"], "document_number": "12345678"})

    def test_update_distinguishes_absent_null_and_value(self, store: MemoryRecordStore, seeded: dict) -> None:
        """Absent leaves the table, null clears it, a value replaces it."""
        service = VoterService(store)
        voter = service.create(
            {"user_id": seeded["user"], "document_number": "12345678", "voting_table_id": seeded["table"]}
        )

        untouched = service.update(voter["id"], {"document_number": "11111111"})
        assert untouched["voting_table_id"] == seeded["table"]

        cleared = service.update(voter["id"], {"voting_table_id": None})
        assert cleared["voting_table_id"] is None
        assert cleared["voting_table"] is None

        with pytest.raises(NotFound):
            service.update(voter["id"], {"voting_table_id": 99})

    def test_update_document_to_own_value_is_allowed(self, store: MemoryRecordStore, seeded: dict) -> None:
        service = VoterService(store)
        voter = service.create({"user_id": seeded["user"], "document_number": "12345678"})

        assert service.update(voter["id"], {"document_number": "12345678"})["document_number"] == "12345678"

    def test_update_document_taken_raises_conflict(self, store: MemoryRecordStore, seeded: dict) -> None:
        service = VoterService(store)
        service.create({"user_id": seeded["user"], "document_number": "12345678"})
        other = service.create({"user_id": seeded["other"], "document_number": "87654321"})

        with pytest.raises(Conflict):
            service.update(other["id"], {"document_number": "12345678"})

    def test_find_one_unknown_raises_not_found(self, store: MemoryRecordStore) -> None:
        with pytest.raises(NotFound, match="Votante no encontrado"):
            VoterService(store).find_one(1)


class TestTableMemberService:
    """Tests for table member profiles and role promotion."""

    def test_create_promotes_account_role(self, store: MemoryRecordStore, seeded: dict) -> None:
        member = TableMemberService(store).create(
            {"user_id": seeded["user"], "voting_table_id": seeded["table"], "role_in_table": "Presidente"}
        )

        assert member["user"]["role"] == "TABLE_MEMBER"
        assert store.tables["users"][seeded["user"]]["role"] == "TABLE_MEMBER"

    def test_one_membership_per_account(self, store: MemoryRecordStore, seeded: dict) -> None:
        service = TableMemberService(store)
        service.create({"user_id": seeded["user"], "voting_table_id": seeded["table"]})

        with pytest.raises(Conflict):
            service.create({"user_id": seeded["user"], "voting_table_id": seeded["table"]})

    def test_unknown_table_leaves_role_untouched(self, store: MemoryRecordStore, seeded: dict) -> None:
        """Failed creation rolls back the promotion with it."""
        with pytest.raises(NotFound):
            TableMemberService(store).create({"user_id": seeded["user"], "voting_table_id": 99})

        assert store.tables["users"][seeded["user"]]["role"] == "VOTER"


class TestVoteIntentionService:
    """Tests for the (account, election, candidate) key."""

    def triple(self, seeded: dict, candidate: str = "candidate") -> dict[str, int]:
        return {"user_id": seeded["user"], "candidate_id": seeded[candidate], "election_id": seeded["election"]}

    def test_new_triple_succeeds(self, store: MemoryRecordStore, seeded: dict) -> None:
        intention = VoteIntentionService(store).create(self.triple(seeded))

        assert intention["candidate"]["full_name"] == "Candidata"
        assert intention["candidate"]["political_group"]["name"] == "Partido Uno"
        assert intention["election"]["name"] == "EG 2026"

    def test_repeated_triple_raises_conflict(self, store: MemoryRecordStore, seeded: dict) -> None:
        service = VoteIntentionService(store)
        service.create(self.triple(seeded))

        with pytest.raises(Conflict):
            service.create(self.triple(seeded))

    def test_other_candidate_same_election_succeeds(self, store: MemoryRecordStore, seeded: dict) -> None:
        service = VoteIntentionService(store)
        service.create(self.triple(seeded))

        service.create(self.triple(seeded, "second_candidate"))

        assert len(store.tables["vote_intentions"]) == 2

    def test_update_into_existing_triple_raises_conflict(self, store: MemoryRecordStore, seeded: dict) -> None:
        service = VoteIntentionService(store)
        service.create(self.triple(seeded))
        second = service.create(self.triple(seeded, "second_candidate"))

        with pytest.raises(Conflict):
            service.update(second["id"], {"candidate_id": seeded["candidate"]})

    def test_update_keeping_own_triple_is_allowed(self, store: MemoryRecordStore, seeded: dict) -> None:
        service = VoteIntentionService(store)
        intention = service.create(self.triple(seeded))

        updated = service.update(intention["id"], {"candidate_id": seeded["candidate"]})

        assert updated["id"] == intention["id"]

    def test_unknown_election_raises_not_found(self, store: MemoryRecordStore, seeded: dict) -> None:
        with pytest.raises(NotFound):
            VoteIntentionService(store).create({**self.triple(seeded), "election_id": 99})


class TestVotingCentersAndTables:
    """Tests for voting centers and tables."""

    def test_duplicate_table_code_raises_conflict(self, store: MemoryRecordStore, seeded: dict) -> None:
        with pytest.raises(Conflict):
            VotingTableService(store).create({"code": "000123", "voting_center_id": seeded["center"]})

    def test_table_needs_existing_center(self, store: MemoryRecordStore) -> None:
        with pytest.raises(NotFound):
            VotingTableService(store).create({"code": "1", "voting_center_id": 99})

    def test_center_lists_its_tables(self, store: MemoryRecordStore, seeded: dict) -> None:
        center = VotingCenterService(store).find_one(seeded["center"])

        assert [table["code"] for table in center["voting_tables"]] == ["000123"]

    def test_table_embeds_voters_and_members(self, store: MemoryRecordStore, seeded: dict) -> None:
        VoterService(store).create(
            {"user_id": seeded["user"], "document_number": "12345678", "voting_table_id": seeded["table"]}
        )
        TableMemberService(store).create({"user_id": seeded["other"], "voting_table_id": seeded["table"]})

        table = VotingTableService(store).find_one(seeded["table"])

        assert table["voters"][0]["document_number"] == "12345678"
        assert table["members"][0]["user"]["name"] == "Ana"

    def test_center_with_tables_cannot_be_removed(self, store: MemoryRecordStore, seeded: dict) -> None:
        with pytest.raises(Conflict):
            VotingCenterService(store).remove(seeded["center"])
