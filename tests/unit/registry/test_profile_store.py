"""Unit tests for ProfileStore."""

import threading
from datetime import datetime, timedelta

import pytest

from core.exceptions import (
    AlreadyExistsError,
    AuthorizationError,
    EmptyContentPointerError,
    ErrorCode,
    HandleNotFoundError,
    HandleTakenError,
    HandleTooLongError,
    HandleTooShortError,
    InvalidHandleCharactersError,
    InvalidInputError,
    NotFoundError,
    ProfileAlreadyExistsError,
    ProfileNotFoundError,
    RegistryConsistencyError,
)
from domain.entities.event import EventKind
from domain.entities.profile import Profile
from domain.registry.profile_store import ProfileStore

CID = "bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi"


def _assert_bijection(store: ProfileStore) -> None:
    snapshot = store.snapshot()
    assert set(snapshot.profiles) == set(snapshot.roster)
    for identity, profile in snapshot.profiles.items():
        assert store.identity_for_handle(profile.handle) == identity


# --- create_profile ---


class TestCreateProfile:
    def test_creates_profile_with_zero_views(self, store: ProfileStore, alice: str):
        event = store.create_profile(alice, CID, "alice")

        profile = store.get_profile(alice)
        assert profile.handle == "alice"
        assert profile.content_pointer == CID
        assert profile.view_count == 0
        assert profile.created_at == profile.updated_at
        assert event.kind == EventKind.CREATED
        assert event.identity == alice
        assert event.payload == {"handle": "alice", "content_pointer": CID}
        assert event.timestamp == profile.created_at

    def test_registers_handle_indexes_and_roster(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")

        assert store.has_profile(alice)
        assert store.identity_for_handle("alice") == alice
        assert store.is_handle_claimed("alice")
        assert store.snapshot().roster == (alice,)
        assert store.total_profiles == 1

    def test_second_profile_for_same_identity_fails(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")

        with pytest.raises(ProfileAlreadyExistsError) as exc_info:
            store.create_profile(alice, CID, "alice2")

        assert isinstance(exc_info.value, AlreadyExistsError)
        assert exc_info.value.error_code == ErrorCode.PROFILE_ALREADY_EXISTS
        assert not store.is_handle_claimed("alice2")
        assert store.total_profiles == 1

    def test_taken_handle_fails(self, store: ProfileStore, alice: str, bob: str):
        store.create_profile(alice, CID, "alice")

        with pytest.raises(HandleTakenError):
            store.create_profile(bob, CID, "alice")

        assert not store.has_profile(bob)
        assert store.identity_for_handle("alice") == alice

    def test_handles_are_case_sensitive(self, store: ProfileStore, alice: str, bob: str):
        store.create_profile(alice, CID, "alice")

        store.create_profile(bob, CID, "ALICE")

        assert store.identity_for_handle("ALICE") == bob

    @pytest.mark.parametrize(
        ("handle", "error_type"),
        [
            ("ab", HandleTooShortError),
            ("", HandleTooShortError),
            ("a" * 21, HandleTooLongError),
            ("ab!", InvalidHandleCharactersError),
            ("has space", InvalidHandleCharactersError),
            ("émile", InvalidHandleCharactersError),
        ],
    )
    def test_rejects_malformed_handles(
        self, store: ProfileStore, alice: str, handle: str, error_type: type
    ):
        with pytest.raises(error_type) as exc_info:
            store.create_profile(alice, CID, handle)

        assert isinstance(exc_info.value, InvalidInputError)
        assert exc_info.value.status_code == 400
        assert not store.has_profile(alice)

    @pytest.mark.parametrize("handle", ["abc", "a" * 20, "Under_Score-99", "---", "___"])
    def test_accepts_boundary_handles(self, store: ProfileStore, alice: str, handle: str):
        store.create_profile(alice, CID, handle)

        assert store.get_profile(alice).handle == handle

    def test_empty_content_pointer_fails(self, store: ProfileStore, alice: str):
        with pytest.raises(EmptyContentPointerError):
            store.create_profile(alice, "", "alice")

        assert not store.is_handle_claimed("alice")

    def test_short_handle_reported_before_existing_profile(
        self, store: ProfileStore, alice: str
    ):
        store.create_profile(alice, CID, "alice")

        with pytest.raises(HandleTooShortError):
            store.create_profile(alice, "", "ab")

    def test_taken_handle_reported_before_existing_profile(
        self, store: ProfileStore, alice: str
    ):
        store.create_profile(alice, CID, "alice")

        with pytest.raises(HandleTakenError):
            store.create_profile(alice, CID, "alice")

    def test_existing_profile_reported_before_empty_pointer(
        self, store: ProfileStore, alice: str
    ):
        store.create_profile(alice, CID, "alice")

        with pytest.raises(ProfileAlreadyExistsError):
            store.create_profile(alice, "", "other")

    def test_bad_characters_reported_before_empty_pointer(self, store: ProfileStore, alice: str):
        with pytest.raises(InvalidHandleCharactersError):
            store.create_profile(alice, "", "a b")


# --- update_profile ---


class TestUpdateProfile:
    def test_replaces_pointer_and_returns_previous(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")

        event = store.update_profile(alice, "bafy-new")

        profile = store.get_profile(alice)
        assert profile.content_pointer == "bafy-new"
        assert profile.updated_at > profile.created_at
        assert profile.handle == "alice"
        assert event.kind == EventKind.UPDATED
        assert event.payload["previous_content_pointer"] == CID
        assert event.payload["content_pointer"] == "bafy-new"
        assert event.payload["privileged"] is False

    def test_keeps_views(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")
        store.record_view(alice)

        store.update_profile(alice, "bafy-new")

        assert store.get_profile(alice).view_count == 1

    def test_missing_profile_fails(self, store: ProfileStore, alice: str):
        with pytest.raises(ProfileNotFoundError) as exc_info:
            store.update_profile(alice, "bafy-new")

        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.details == {"identity": alice}

    def test_missing_profile_reported_before_empty_pointer(self, store: ProfileStore, alice: str):
        with pytest.raises(ProfileNotFoundError):
            store.update_profile(alice, "")

    def test_empty_pointer_fails(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")

        with pytest.raises(EmptyContentPointerError):
            store.update_profile(alice, "")

        assert store.get_profile(alice).content_pointer == CID

    def test_updated_at_never_moves_backwards(self, alice: str):
        readings = iter(
            [datetime(2026, 1, 1, 12, 0, 0), datetime(2025, 12, 31, 23, 0, 0)]
        )
        store = ProfileStore(clock=lambda: next(readings))
        store.create_profile(alice, CID, "alice")

        store.update_profile(alice, "bafy-new")

        profile = store.get_profile(alice)
        assert profile.created_at <= profile.updated_at


# --- privileged_override ---


class TestPrivilegedOverride:
    def test_overrides_pointer_when_authorized(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")

        event = store.privileged_override(alice, "bafy-clean", authorized=True)

        assert store.get_profile(alice).content_pointer == "bafy-clean"
        assert event.payload["privileged"] is True
        assert event.payload["previous_content_pointer"] == CID

    def test_accepts_empty_pointer(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")

        store.privileged_override(alice, "", authorized=True)

        assert store.get_profile(alice).content_pointer == ""

    def test_unauthorized_call_fails_without_change(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")

        with pytest.raises(AuthorizationError):
            store.privileged_override(alice, "bafy-clean", authorized=False)

        assert store.get_profile(alice).content_pointer == CID

    def test_missing_profile_fails(self, store: ProfileStore, alice: str):
        with pytest.raises(ProfileNotFoundError):
            store.privileged_override(alice, "bafy-clean", authorized=True)


# --- record_view ---


class TestRecordView:
    def test_counts_each_view(self, store: ProfileStore, alice: str, bob: str):
        store.create_profile(alice, CID, "alice")

        for _ in range(5):
            store.record_view(alice, viewer=bob)

        assert store.get_profile(alice).view_count == 5
        assert store.total_views == 5

    def test_self_views_count(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")

        event = store.record_view(alice, viewer=alice)

        assert event.kind == EventKind.VIEW_RECORDED
        assert event.payload == {"viewer": alice, "view_count": 1}
        assert event.actor == alice

    def test_anonymous_viewer(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")

        event = store.record_view(alice)

        assert event.payload["viewer"] is None

    def test_only_view_count_changes(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")
        before = store.get_profile(alice)

        store.record_view(alice)

        after = store.get_profile(alice)
        assert after.view_count == before.view_count + 1
        assert after.updated_at == before.updated_at
        assert after.content_pointer == before.content_pointer

    def test_missing_profile_changes_nothing(self, store: ProfileStore, alice: str, bob: str):
        store.create_profile(alice, CID, "alice")

        with pytest.raises(ProfileNotFoundError):
            store.record_view(bob)

        assert store.total_views == 0
        assert store.get_profile(alice).view_count == 0


# --- lookups ---


class TestLookups:
    def test_get_profile_returns_copy(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")

        copy = store.get_profile(alice)
        copy.view_count = 999
        copy.content_pointer = "tampered"

        assert store.get_profile(alice).view_count == 0
        assert store.get_profile(alice).content_pointer == CID

    def test_get_profile_by_handle(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")

        assert store.get_profile_by_handle("alice").identity == alice

    def test_unknown_handle_fails(self, store: ProfileStore):
        with pytest.raises(HandleNotFoundError) as exc_info:
            store.get_profile_by_handle("nobody")

        assert exc_info.value.status_code == 404

    def test_dangling_handle_is_consistency_error(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")
        del store._profiles[alice]

        with pytest.raises(RegistryConsistencyError) as exc_info:
            store.get_profile_by_handle("alice")

        assert exc_info.value.status_code == 500

    def test_handle_availability(self, store: ProfileStore, alice: str):
        store.create_profile(alice, CID, "alice")

        assert not store.is_handle_available("alice")
        assert store.is_handle_available("ALICE")
        assert not store.is_handle_available("ab")
        assert not store.is_handle_available("ab!")
        assert not store.is_handle_available("a" * 21)
        assert store.is_handle_available("a" * 20)


# --- load ---


class TestLoad:
    def test_rebuilds_indexes_and_totals(self, store: ProfileStore, alice: str, bob: str):
        store.load(
            [
                Profile(identity=alice, content_pointer=CID, handle="alice", view_count=3),
                Profile(identity=bob, content_pointer=CID, handle="bob", view_count=1),
            ]
        )

        assert store.snapshot().roster == (alice, bob)
        assert store.total_profiles == 2
        assert store.total_views == 4
        assert store.identity_for_handle("bob") == bob
        _assert_bijection(store)

    def test_rejects_duplicate_handle_and_keeps_state(
        self, store: ProfileStore, alice: str, bob: str, carol: str
    ):
        store.create_profile(carol, CID, "carol")

        with pytest.raises(RegistryConsistencyError):
            store.load(
                [
                    Profile(identity=alice, content_pointer=CID, handle="same"),
                    Profile(identity=bob, content_pointer=CID, handle="same"),
                ]
            )

        assert store.snapshot().roster == (carol,)

    def test_rejects_duplicate_identity(self, store: ProfileStore, alice: str):
        with pytest.raises(RegistryConsistencyError):
            store.load(
                [
                    Profile(identity=alice, content_pointer=CID, handle="one"),
                    Profile(identity=alice, content_pointer=CID, handle="two"),
                ]
            )

    def test_rejects_malformed_handle(self, store: ProfileStore, alice: str):
        with pytest.raises(RegistryConsistencyError):
            store.load([Profile(identity=alice, content_pointer=CID, handle="no!")])

    def test_rejects_updated_before_created(self, store: ProfileStore, alice: str, carol: str):
        store.create_profile(carol, CID, "carol")
        created = datetime(2026, 1, 1, 12, 0, 0)

        with pytest.raises(RegistryConsistencyError) as exc_info:
            store.load(
                [
                    Profile(
                        identity=alice,
                        content_pointer=CID,
                        handle="alice",
                        created_at=created,
                        updated_at=created - timedelta(seconds=1),
                    )
                ]
            )

        assert exc_info.value.details == {"identity": alice}
        assert store.snapshot().roster == (carol,)

    def test_restore_returns_to_snapshot(self, store: ProfileStore, alice: str, bob: str):
        store.create_profile(alice, CID, "alice")
        before = store.snapshot()
        store.create_profile(bob, CID, "bob")
        store.record_view(alice)

        store.restore(before)

        assert store.snapshot().roster == (alice,)
        assert store.is_handle_available("bob")
        assert store.total_views == 0
        _assert_bijection(store)

    def test_loaded_profiles_are_detached(self, store: ProfileStore, alice: str):
        source = Profile(identity=alice, content_pointer=CID, handle="alice")
        store.load([source])

        source.view_count = 50

        assert store.get_profile(alice).view_count == 0


# --- properties ---


class TestInvariants:
    def test_no_handle_or_identity_succeeds_twice(
        self, store: ProfileStore, alice: str, bob: str, carol: str
    ):
        attempts = [
            (alice, "alice"),
            (bob, "alice"),
            (alice, "other"),
            (bob, "bob"),
            (carol, "bob"),
            (carol, "carol"),
        ]
        succeeded = []
        for identity, handle in attempts:
            try:
                store.create_profile(identity, CID, handle)
                succeeded.append((identity, handle))
            except (AlreadyExistsError, InvalidInputError):
                pass

        assert succeeded == [(alice, "alice"), (bob, "bob"), (carol, "carol")]
        _assert_bijection(store)

    def test_timestamps_ordered_after_every_operation(
        self, store: ProfileStore, alice: str, bob: str
    ):
        store.create_profile(alice, CID, "alice")
        store.create_profile(bob, CID, "bob")
        store.update_profile(alice, "bafy-1")
        store.record_view(bob)
        store.privileged_override(bob, "bafy-2", authorized=True)

        for profile in store.snapshot().profiles.values():
            assert profile.created_at <= profile.updated_at

    def test_concurrent_creates_keep_bijection(self, store: ProfileStore):
        errors: list[Exception] = []

        def worker(index: int) -> None:
            for attempt in range(20):
                try:
                    store.create_profile(f"0x{index:040x}", CID, f"user{attempt}")
                    return
                except HandleTakenError:
                    continue
                except Exception as e:  # pragma: no cover - surfaced by the assert below
                    errors.append(e)
                    return

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert store.total_profiles == 10
        _assert_bijection(store)

    def test_running_totals_match_fresh_sum(self, store: ProfileStore, alice: str, bob: str):
        store.create_profile(alice, CID, "alice")
        store.create_profile(bob, CID, "bob")
        for _ in range(3):
            store.record_view(alice)
        store.record_view(bob)

        snapshot = store.snapshot()
        assert store.total_views == sum(p.view_count for p in snapshot.profiles.values())
        assert store.total_profiles == len(snapshot.roster)
