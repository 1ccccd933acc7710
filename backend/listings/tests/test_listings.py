from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from listings.models import Car, Experience, Service, Stay

User = get_user_model()


@pytest.fixture
def client():
    return APIClient()


@pytest.fixture
def host(db):
    return User.objects.create_user(
        username="host@example.com",
        email="host@example.com",
        password="examplepass",
        display_name="Hannah Host",
        role=User.ROLE_HOST,
    )


@pytest.fixture
def other_host(db):
    return User.objects.create_user(
        username="other@example.com",
        email="other@example.com",
        password="examplepass",
        role=User.ROLE_HOST,
    )


def _car(host, title, **extra):
    return Car.objects.create(
        host=host,
        title=title,
        location="Lekki, Lagos",
        state="Lagos",
        price_per_day=Decimal("20000.00"),
        **extra,
    )


def test_car_list_is_public_and_newest_first(db, client, host):
    first = _car(host, "Camry")
    second = _car(host, "Corolla")

    response = client.get("/api/cars/")

    assert response.status_code == 200
    ids = [car["id"] for car in response.json()["cars"]]
    assert ids == [second.id, first.id]


def test_car_list_applies_limit_and_offset(db, client, host):
    cars = [_car(host, f"Car {index}") for index in range(5)]

    response = client.get("/api/cars/", {"limit": 2, "offset": 1})

    ids = [car["id"] for car in response.json()["cars"]]
    assert ids == [cars[3].id, cars[2].id]


def test_car_list_defaults_to_ten_items(db, client, host):
    for index in range(12):
        _car(host, f"Car {index}")

    response = client.get("/api/cars/")

    assert len(response.json()["cars"]) == 10


def test_car_list_rejects_non_numeric_limit(db, client, host):
    response = client.get("/api/cars/", {"limit": "many"})

    assert response.status_code == 400
    assert "limit" in response.json()["details"]


def test_car_list_filters_by_host(db, client, host, other_host):
    mine = _car(host, "Camry")
    _car(other_host, "Hilux")

    response = client.get("/api/cars/", {"host_id": host.id})

    cars = response.json()["cars"]
    assert [car["id"] for car in cars] == [mine.id]
    assert cars[0]["host_name"] == "Hannah Host"


def test_car_detail_and_not_found(db, client, host):
    car = _car(host, "Camry", make="Toyota", model="Camry", year=2021)

    found = client.get(f"/api/cars/{car.id}/")
    missing = client.get("/api/cars/999999/")

    assert found.status_code == 200
    assert found.json()["car"]["make"] == "Toyota"
    assert found.json()["car"]["price_per_day"] == "20000.00"
    assert missing.status_code == 404
    assert missing.json() == {"error": "Car not found"}


def test_stay_list_filters_by_state_case_insensitively(db, client, host):
    lagos = Stay.objects.create(
        host=host,
        title="Ikoyi Flat",
        location="Ikoyi",
        state="Lagos",
        price_per_night=Decimal("65000.00"),
    )
    Stay.objects.create(
        host=host,
        title="Maitama Villa",
        location="Maitama",
        state="FCT",
        price_per_night=Decimal("90000.00"),
    )

    response = client.get("/api/stays/", {"state": "lagos"})

    assert [stay["id"] for stay in response.json()["stays"]] == [lagos.id]


def test_service_detail_not_found_message(db, client):
    response = client.get("/api/services/12345/")

    assert response.status_code == 404
    assert response.json() == {"error": "Service not found"}


def test_homepage_returns_six_of_each_kind(db, client, host):
    for index in range(8):
        car = _car(host, f"Car {index}")
        service = Service.objects.create(
            host=host,
            title=f"Service {index}",
            location="Lagos",
            price=Decimal("15000.00"),
        )
        experience = Experience.objects.create(
            host=host,
            title=f"Tour {index}",
            location="Lagos",
            price_per_person=Decimal("25000.00"),
            car=car,
        )
        experience.services.add(service)

    response = client.get("/api/listings/homepage/")

    assert response.status_code == 200
    body = response.json()
    assert len(body["cars"]) == 6
    assert len(body["services"]) == 6
    assert len(body["experiences"]) == 6
    newest = body["experiences"][0]
    assert newest["title"] == "Tour 7"
    assert newest["car"]["title"] == "Car 7"
    assert newest["services"][0]["title"] == "Service 7"
