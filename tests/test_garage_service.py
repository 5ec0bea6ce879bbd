"""Unit tests for the garage service (user ↔ catalog vehicle membership)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import uuid
from unittest.mock import patch
import pytest
from carit.exceptions import ForbiddenError, InvalidArgumentError, NotFoundError
from carit.models.catalog_vehicle import CatalogVehicle
from carit.models.garage_vehicle import GarageVehicle
from carit.services.catalog_service import find_or_create, get_vehicle
from carit.services.garage_service import add_vehicle, edit_vehicle, list_garage, remove_vehicle

CIVIC = {"year": 2021, "make": "Honda", "model": "Civic", "trim": "EX"}
CAMRY = {"year": 2020, "make": "Toyota", "model": "Camry", "trim": "LE"}


class TestGarageScenario:
    def test_add_dedup_remove_then_edit_fails(self, db, make_user):
        make_user("u1")

        civic = add_vehicle(db, "u1", CIVIC)
        assert len(list_garage(db, "u1")) == 1

        again = add_vehicle(db, "u1", dict(CIVIC))
        assert again["_id"] == civic["_id"]
        assert len(list_garage(db, "u1")) == 1

        camry = add_vehicle(db, "u1", CAMRY)
        assert [car["_id"] for car in list_garage(db, "u1")] == [civic["_id"], camry["_id"]]

        remove_vehicle(db, "u1", civic["_id"])
        garage = list_garage(db, "u1")
        assert [car["_id"] for car in garage] == [camry["_id"]]

        with pytest.raises(ForbiddenError):
            edit_vehicle(db, "u1", civic["_id"], {"trim": "LX"})


class TestAddVehicle:
    def test_returns_hydrated_entry(self, db, make_user):
        make_user("u1")
        car = add_vehicle(db, "u1", {"year": "2020", "make": "Toyota", "model": "Corolla"})

        assert car["year"] == 2020
        assert car["trim"] == ""
        assert set(car) == {"_id", "year", "make", "model", "trim"}

    def test_two_users_share_one_catalog_entry(self, db, make_user):
        make_user("u1")
        make_user("u2")
        a = add_vehicle(db, "u1", CIVIC)
        b = add_vehicle(db, "u2", CIVIC)

        assert a["_id"] == b["_id"]
        assert db.query(CatalogVehicle).count() == 1
        assert db.query(GarageVehicle).count() == 2

    def test_unknown_user(self, db):
        with pytest.raises(NotFoundError):
            add_vehicle(db, "ghost", CIVIC)

    @pytest.mark.parametrize("user_id,description", [
        ("", CIVIC),
        ("u1", None),
        ("u1", {}),
        ("u1", {"year": 2021, "model": "Civic"}),
    ])
    def test_missing_input(self, db, make_user, user_id, description):
        make_user("u1")
        with pytest.raises(InvalidArgumentError):
            add_vehicle(db, user_id, description)


class TestListGarage:
    def test_unknown_user_has_empty_garage(self, db):
        assert list_garage(db, "ghost") == []

    def test_empty_id_rejected(self, db):
        with pytest.raises(InvalidArgumentError):
            list_garage(db, "")


class TestEditVehicle:
    def test_copy_on_write_leaves_other_owner_untouched(self, db, make_user):
        make_user("u1")
        make_user("u2")
        shared = add_vehicle(db, "u1", CIVIC)
        add_vehicle(db, "u2", CIVIC)

        edited = edit_vehicle(db, "u1", shared["_id"], {"trim": "Sport"})

        assert edited["_id"] != shared["_id"]
        assert edited["trim"] == "Sport"
        assert list_garage(db, "u1") == [edited]
        assert list_garage(db, "u2") == [shared]
        assert get_vehicle(db, shared["_id"]).trim == "EX"

    def test_sole_owner_edit_drops_old_entry(self, db, make_user):
        make_user("u1")
        car = add_vehicle(db, "u1", CIVIC)

        edited = edit_vehicle(db, "u1", car["_id"], {"year": 2022})

        assert edited["year"] == 2022
        assert get_vehicle(db, car["_id"]) is None
        assert db.query(CatalogVehicle).count() == 1

    def test_edit_into_vehicle_already_owned_merges(self, db, make_user):
        make_user("u1")
        civic = add_vehicle(db, "u1", CIVIC)
        camry = add_vehicle(db, "u1", CAMRY)

        result = edit_vehicle(db, "u1", civic["_id"], CAMRY)

        assert result["_id"] == camry["_id"]
        assert list_garage(db, "u1") == [camry]
        assert get_vehicle(db, civic["_id"]) is None

    def test_unchanged_tuple_is_noop(self, db, make_user):
        make_user("u1")
        car = add_vehicle(db, "u1", CIVIC)
        assert edit_vehicle(db, "u1", car["_id"], {"make": "Honda"}) == car

    def test_not_owned_is_forbidden_and_changes_nothing(self, db, make_user):
        make_user("u1")
        make_user("u2")
        theirs = add_vehicle(db, "u2", CIVIC)
        mine = add_vehicle(db, "u1", CAMRY)

        with pytest.raises(ForbiddenError):
            edit_vehicle(db, "u1", theirs["_id"], {"trim": "LX"})

        assert get_vehicle(db, theirs["_id"]).trim == "EX"
        assert list_garage(db, "u1") == [mine]
        assert list_garage(db, "u2") == [theirs]

    def test_unknown_user(self, db, make_user):
        make_user("u1")
        car = add_vehicle(db, "u1", CIVIC)
        with pytest.raises(NotFoundError):
            edit_vehicle(db, "ghost", car["_id"], {"trim": "LX"})

    def test_concurrent_remove_leaves_no_orphan(self, db, make_user):
        make_user("u1")
        car = add_vehicle(db, "u1", CIVIC)
        created = []

        def find_then_lose_membership(session, *args):
            target = find_or_create(session, *args)
            created.append(target.id)
            remove_vehicle(session, "u1", car["_id"])
            return target

        with patch("carit.services.garage_service.find_or_create", side_effect=find_then_lose_membership):
            with pytest.raises(ForbiddenError):
                edit_vehicle(db, "u1", car["_id"], {"trim": "LX"})

        assert get_vehicle(db, created[0]) is None
        assert db.query(CatalogVehicle).count() == 0

    @pytest.mark.parametrize("updates", [{}, {"color": "red"}, {"trim": None}])
    def test_bad_updates_rejected(self, db, make_user, updates):
        make_user("u1")
        car = add_vehicle(db, "u1", CIVIC)
        with pytest.raises(InvalidArgumentError):
            edit_vehicle(db, "u1", car["_id"], updates)


class TestRemoveVehicle:
    def test_shared_entry_survives_until_last_owner_removes(self, db, make_user):
        make_user("u1")
        make_user("u2")
        car = add_vehicle(db, "u1", CIVIC)
        add_vehicle(db, "u2", CIVIC)

        assert remove_vehicle(db, "u1", car["_id"]) is False
        assert get_vehicle(db, car["_id"]) is not None
        assert list_garage(db, "u2") == [car]

        assert remove_vehicle(db, "u2", car["_id"]) is True
        assert get_vehicle(db, car["_id"]) is None

    def test_accepts_structured_and_dashed_ids(self, db, make_user):
        make_user("u1")
        civic = add_vehicle(db, "u1", CIVIC)
        camry = add_vehicle(db, "u1", CAMRY)

        remove_vehicle(db, "u1", uuid.UUID(civic["_id"]))
        remove_vehicle(db, "u1", str(uuid.UUID(camry["_id"])).upper())

        assert list_garage(db, "u1") == []

    def test_not_owned_is_forbidden_and_changes_nothing(self, db, make_user):
        make_user("u1")
        make_user("u2")
        theirs = add_vehicle(db, "u2", CIVIC)

        with pytest.raises(ForbiddenError):
            remove_vehicle(db, "u1", theirs["_id"])

        assert get_vehicle(db, theirs["_id"]) is not None
        assert list_garage(db, "u2") == [theirs]

    def test_missing_car_id(self, db, make_user):
        make_user("u1")
        with pytest.raises(InvalidArgumentError):
            remove_vehicle(db, "u1", None)
