import json

import httpx
import pytest

from listing_writer.config import Settings
from listing_writer.services.lookup_client import VehicleLookupClient
from listing_writer.services.nhtsa import NHTSAService
from listing_writer.services.openrouter import OpenRouterClient

HONDA_VIN = "1HGCM82633A004352"

HONDA_DECODE = {
    "ErrorCode": "0",
    "ErrorText": "0 - VIN decoded clean. Check Digit (9th position) is correct",
    "ModelYear": "2003",
    "Make": "HONDA",
    "Model": "Accord",
    "Trim": "EX-V6",
    "DisplacementL": "3.0",
    "TransmissionStyle": "Automatic",
    "DriveType": "FWD/Front-Wheel Drive",
}


class FakeVPIC:
    """Stands in for vpic.nhtsa.dot.gov behind an httpx.MockTransport."""

    def __init__(self):
        self.models = {
            ("Toyota", 2020): ["Camry", "Corolla", "Corolla", "RAV4"],
        }
        self.vins = {HONDA_VIN: HONDA_DECODE}
        self.status_code = 200
        # overrides the whole JSON body when set
        self.body = None
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code)
        if self.body is not None:
            return httpx.Response(200, json=self.body)

        parts = request.url.path.split("/")
        if "GetModelsForMakeYear" in parts:
            key = (parts[-3], int(parts[-1]))
            rows = [
                {"Make_Name": key[0].upper(), "Model_Name": name}
                for name in self.models.get(key, [])
            ]
            return httpx.Response(200, json={"Count": len(rows), "Results": rows})

        if "DecodeVinValues" in parts:
            row = self.vins.get(
                parts[-1],
                {"ErrorCode": "11", "ErrorText": "11 - Incorrect Model Year"},
            )
            return httpx.Response(200, json={"Count": 1, "Results": [row]})

        return httpx.Response(404)


class FakeCompletions:
    """Stands in for the chat-completions endpoint."""

    def __init__(self, text="A great car."):
        self.text = text
        self.status_code = 200
        self.payloads = []

    @property
    def last_prompt(self) -> str:
        return self.payloads[-1]["messages"][0]["content"]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.payloads.append(json.loads(request.content))
        if self.status_code != 200:
            return httpx.Response(self.status_code)
        return httpx.Response(
            200, json={"choices": [{"message": {"role": "assistant", "content": self.text}}]}
        )


@pytest.fixture
def settings():
    return Settings(openrouter_api_key="test-key")


@pytest.fixture
def vpic():
    return FakeVPIC()


@pytest.fixture
def completions():
    return FakeCompletions()


def build_lookup(settings, vpic, completions) -> VehicleLookupClient:
    return VehicleLookupClient(
        nhtsa=NHTSAService(settings, transport=httpx.MockTransport(vpic)),
        completions=OpenRouterClient(settings, transport=httpx.MockTransport(completions)),
        settings=settings,
    )


@pytest.fixture
def lookup(settings, vpic, completions):
    return build_lookup(settings, vpic, completions)


@pytest.fixture
def unconfigured_lookup(vpic, completions):
    return build_lookup(Settings(openrouter_api_key=""), vpic, completions)
