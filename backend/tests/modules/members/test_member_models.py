"""Tests for members module models."""

import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from modules.locations.models import GeoPoint
from modules.members.models import (
    CreateMemberRequest,
    LocationMode,
    Member,
    MemberDraft,
    MemberLocation,
    PetStatus,
    PetType,
    format_location,
)


def _draft(**overrides) -> MemberDraft:
    fields = {
        "pet_name": "Luna",
        "pet_type": "Cat",
        "location": MemberLocation(city="Paris", country="France"),
        "coordinates": GeoPoint(longitude=2.35, latitude=48.85),
    }
    fields.update(overrides)
    return MemberDraft(**fields)


class TestPetEnums:
    def test_pet_type_case_insensitive(self):
        assert PetType("dog") is PetType.DOG
        assert PetType(" REPTILE ") is PetType.REPTILE

    def test_pet_type_unknown(self):
        with pytest.raises(ValueError):
            PetType("Dragon")

    def test_pet_status_variants(self):
        assert PetStatus("In Heart") is PetStatus.IN_HEART
        assert PetStatus("with_you") is PetStatus.WITH_YOU


class TestFormatLocation:
    def test_with_state(self):
        assert format_location("Austin", "TX", "USA") == "Austin, TX, USA"

    def test_without_state(self):
        assert format_location("Paris", "", "France") == "Paris, France"


class TestMemberDraft:
    def test_formatted_recomputed(self):
        draft = _draft(location=MemberLocation(city="Austin", state="TX", country="USA", formatted="stale"))
        assert draft.location.formatted == "Austin, TX, USA"

    def test_defaults(self):
        draft = _draft()
        assert draft.pet_status is PetStatus.WITH_YOU
        assert draft.is_active is True
        assert draft.is_verified is True

    def test_pet_type_lowercase_accepted(self):
        assert _draft(pet_type="dog").pet_type is PetType.DOG

    def test_missing_pet_type(self):
        with pytest.raises(ValidationError, match="Pet type is required"):
            _draft(pet_type=None)

    def test_invalid_pet_type(self):
        with pytest.raises(ValidationError, match="not a valid pet type"):
            _draft(pet_type="Dragon")

    def test_pet_name_too_long(self):
        with pytest.raises(ValidationError):
            _draft(pet_name="x" * 101)

    def test_blank_pet_name(self):
        with pytest.raises(ValidationError):
            _draft(pet_name="   ")

    def test_city_mode_requires_city(self):
        with pytest.raises(ValidationError, match="City is required"):
            _draft(location=MemberLocation(country="France"))

    def test_coordinates_mode_allows_missing_city(self):
        draft = _draft(
            location=MemberLocation(country="GPS Location"),
            location_mode=LocationMode.COORDINATES,
        )
        assert draft.location.formatted == "GPS Location"

    def test_email_normalized(self):
        assert _draft(email="Sam@Example.COM").email == "sam@example.com"

    def test_blank_email_is_none(self):
        assert _draft(email="  ").email is None

    def test_bad_email(self):
        with pytest.raises(ValidationError):
            _draft(email="not-an-email")


class TestMember:
    def test_email_not_serialized(self):
        member = Member(
            id="m-1",
            pet_name="Luna",
            pet_type=PetType.CAT,
            location=MemberLocation(city="Paris", country="France"),
            coordinates=GeoPoint(longitude=2.35, latitude=48.85),
            email="owner@example.com",
            created_at=datetime.now(timezone.utc),
        )
        dumped = member.model_dump(by_alias=True)
        assert "email" not in dumped
        assert dumped["petName"] == "Luna"


class TestCreateMemberRequest:
    def test_camel_case_input(self):
        request = CreateMemberRequest(**{"petName": "Luna", "useCoordinates": True, "latitude": "1.5"})
        assert request.pet_name == "Luna"
        assert request.use_coordinates is True
        assert request.latitude == "1.5"

    @pytest.mark.parametrize("key", ["am_id", "amId", "affiliateId"])
    def test_affiliate_aliases(self, key):
        assert CreateMemberRequest(**{key: "aff-9"}).am_id == "aff-9"

    def test_unknown_fields_ignored(self):
        request = CreateMemberRequest(**{"petName": "Luna", "utm_source": "x"})
        assert not hasattr(request, "utm_source")
