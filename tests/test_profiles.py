import pytest
from sqlalchemy.exc import IntegrityError

from models import storage
from models.subscription import Subscription
from services.exceptions import NotFoundError, ValidationError


def _subscribe(subscriber, channel):
    storage.new(Subscription(subscriber_id=subscriber.id, channel_id=channel.id))
    storage.save()


def test_update_details(register_account, profiles):
    account = register_account()
    updated = profiles.update_details(account.id, " Alice Liddell ", "alice@x.com")
    assert updated.full_name == "Alice Liddell"
    assert updated.email == "alice@x.com"


@pytest.mark.parametrize("full_name,email", [("", "a@x.com"), ("Alice", None), ("  ", "  ")])
def test_update_details_requires_both_fields(register_account, profiles, full_name, email):
    account = register_account()
    with pytest.raises(ValidationError):
        profiles.update_details(account.id, full_name, email)


def test_update_details_to_taken_email_hits_unique_index(register_account, profiles):
    register_account()
    bob = register_account(username="bob", email="b@x.com")
    with pytest.raises(IntegrityError):
        profiles.update_details(bob.id, "Bob", "a@x.com")


def test_update_avatar_and_cover_image(register_account, profiles, make_file):
    account = register_account()
    assert profiles.update_avatar(account.id, make_file("new-avatar.png")).avatar.endswith("new-avatar.png")
    assert profiles.update_cover_image(account.id, make_file("cover.png")).cover_image.endswith("cover.png")


def test_media_update_requires_a_url(register_account, profiles, make_file):
    account = register_account()
    old_avatar = account.avatar
    with pytest.raises(ValidationError):
        profiles.update_avatar(account.id, None)
    with pytest.raises(ValidationError):
        profiles.update_avatar(account.id, make_file("broken.png"))
    assert account.avatar == old_avatar


def test_channel_profile_counts(register_account, profiles):
    alice = register_account()
    bob = register_account(username="bob", email="b@x.com")
    carol = register_account(username="carol", email="c@x.com")
    _subscribe(bob, alice)
    _subscribe(carol, alice)
    _subscribe(alice, bob)

    profile = profiles.channel_profile("Alice", viewer_id=bob.id)
    assert profile["username"] == "alice"
    assert profile["subscribers_count"] == 2
    assert profile["channels_subscribed_to_count"] == 1
    assert profile["is_subscribed"] is True

    assert profiles.channel_profile("carol", viewer_id=bob.id)["is_subscribed"] is False
    assert profiles.channel_profile("carol")["subscribers_count"] == 0


def test_channel_profile_errors(profiles):
    with pytest.raises(ValidationError):
        profiles.channel_profile("  ")
    with pytest.raises(NotFoundError):
        profiles.channel_profile("ghost")
