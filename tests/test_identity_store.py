import pytest

from minisocial.services.identity_store import DEMO_USER_EMAIL, IdentityStore
from minisocial.utils.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    MissingFieldsError,
)


def test_sign_up_then_log_in(identity):
    created = identity.sign_up("Alice", "alice@example.com", "pw")
    identity.log_out()
    session = identity.log_in("alice@example.com", "pw")
    assert session.id == created.id
    assert session.name == "Alice"
    assert identity.session == session


def test_sign_up_starts_session(identity):
    session = identity.sign_up("Alice", "alice@example.com", "pw")
    assert identity.current_session() == session


def test_session_excludes_password(identity):
    session = identity.sign_up("Alice", "alice@example.com", "pw")
    assert "password_secret" not in session.model_dump()


def test_email_is_normalized(identity):
    identity.sign_up("Alice", "  Alice@Example.COM ", "pw")
    assert identity.get_user("alice@example.com") is not None
    assert identity.log_in("ALICE@example.com", "pw").email == "alice@example.com"


def test_duplicate_email_rejected(identity, storage):
    identity.sign_up("Alice", "alice@example.com", "pw")
    with pytest.raises(DuplicateEmailError):
        identity.sign_up("Other Alice", "ALICE@example.com", "pw2")
    assert len(storage.load("users", [])) == 1
    assert len(identity.list_users()) == 1


def test_blank_fields_rejected(identity):
    with pytest.raises(MissingFieldsError):
        identity.sign_up("   ", "a@example.com", "pw")
    with pytest.raises(MissingFieldsError):
        identity.sign_up("A", "", "pw")
    with pytest.raises(MissingFieldsError):
        identity.sign_up("A", "a@example.com", "")
    assert identity.list_users() == []


def test_wrong_password_rejected(identity):
    identity.sign_up("Alice", "alice@example.com", "pw")
    identity.log_out()
    with pytest.raises(InvalidCredentialsError):
        identity.log_in("alice@example.com", "PW")
    assert identity.session is None


def test_unknown_email_rejected(identity):
    with pytest.raises(InvalidCredentialsError):
        identity.log_in("nobody@example.com", "pw")


def test_log_out_is_idempotent(identity, storage):
    identity.sign_up("Alice", "alice@example.com", "pw")
    identity.log_out()
    identity.log_out()
    assert identity.session is None
    assert storage.load("current_user", None) is None


def test_default_avatar_generated_from_name(identity):
    session = identity.sign_up("Ada Lovelace", "ada@example.com", "pw")
    assert session.avatar_ref.startswith("https://ui-avatars.com/api/?name=Ada%20Lovelace")


def test_explicit_avatar_kept(identity):
    session = identity.sign_up("Ada", "ada@example.com", "pw", avatar_ref="data:image/png;base64,AAA")
    assert session.avatar_ref == "data:image/png;base64,AAA"


def test_state_survives_new_store_instance(identity, storage):
    session = identity.sign_up("Alice", "alice@example.com", "pw")
    reopened = IdentityStore(storage)
    assert reopened.session == session
    assert reopened.get_user("alice@example.com").id == session.id


def test_sees_writes_from_another_instance(identity, storage):
    other = IdentityStore(storage)
    other.sign_up("Bob", "bob@example.com", "pw")
    assert identity.log_in("bob@example.com", "pw").name == "Bob"


def test_corrupt_users_blob_treated_as_empty(identity, storage):
    storage.path_for("users").write_text("[{broken", encoding="utf-8")
    assert identity.list_users() == []
    identity.sign_up("Alice", "alice@example.com", "pw")
    assert len(identity.list_users()) == 1


def test_invalid_user_record_skipped(identity, storage):
    storage.save("users", [{"id": "u1"}, "junk"])
    assert identity.list_users() == []


def test_demo_user_seeded_once(identity):
    demo = identity.ensure_demo_user()
    assert demo.email == DEMO_USER_EMAIL
    assert identity.ensure_demo_user() is None
    assert identity.log_in(DEMO_USER_EMAIL, "guest").id == "u_demo"


def test_demo_user_not_seeded_when_users_exist(identity):
    identity.sign_up("Alice", "alice@example.com", "pw")
    assert identity.ensure_demo_user() is None
    assert identity.get_user(DEMO_USER_EMAIL) is None


def test_avatar_template_with_other_placeholders(storage):
    store = IdentityStore(storage, avatar_template="https://x/{name}?style={style}")
    session = store.sign_up("Ada Lovelace", "ada@example.com", "pw")
    assert session.avatar_ref == "https://x/Ada%20Lovelace?style={style}"
