from datetime import date

import pytest

from listing_writer.errors import (
    ConfigurationError,
    GenerationError,
    ServiceLookupError,
    ValidationError,
)
from listing_writer.models.vehicle import VehicleRecord
from listing_writer.services.lookup_client import (
    COMMON_MAKES,
    NO_TEXT_FALLBACK,
    common_colors,
)

from .conftest import HONDA_VIN


class TestMakes:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("year", [1899, date.today().year + 2, 0])
    async def test_invalid_year(self, lookup, vpic, year):
        with pytest.raises(ValidationError, match="Invalid year selected"):
            await lookup.list_makes_for_year(year)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("year", [1900, 1995, date.today().year + 1])
    async def test_static_list_for_any_valid_year(self, lookup, vpic, year):
        makes = await lookup.list_makes_for_year(year)
        assert makes == COMMON_MAKES
        assert makes[0] == "Acura" and makes[-1] == "Volvo"
        assert vpic.requests == []


class TestModels:
    @pytest.mark.asyncio
    async def test_deduplicated_and_sorted(self, lookup):
        models = await lookup.list_models_for_make_year("Toyota", 2020)
        assert models == ["Camry", "Corolla", "RAV4"]

    @pytest.mark.asyncio
    async def test_dedup_is_case_sensitive(self, lookup, vpic):
        vpic.models[("Mazda", 2021)] = ["MX-5", "CX-5", "Mx-5", "CX-5"]
        models = await lookup.list_models_for_make_year("Mazda", 2021)
        assert models == ["CX-5", "MX-5", "Mx-5"]
        assert len(models) == len(set(models))

    @pytest.mark.asyncio
    async def test_request_path(self, lookup, vpic):
        await lookup.list_models_for_make_year("Toyota", 2020)
        url = vpic.requests[0].url
        assert url.path.endswith("/GetModelsForMakeYear/make/Toyota/modelyear/2020")
        assert url.params["format"] == "json"

    @pytest.mark.asyncio
    async def test_no_results(self, lookup):
        with pytest.raises(ServiceLookupError, match="No models found"):
            await lookup.list_models_for_make_year("Toyota", 1950)

    @pytest.mark.asyncio
    async def test_http_failure(self, lookup, vpic):
        vpic.status_code = 503
        with pytest.raises(ServiceLookupError) as exc:
            await lookup.list_models_for_make_year("Toyota", 2020)
        assert exc.value.message == "Failed to fetch models: Service Unavailable"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [["unexpected"], {"Results": ["Camry", "RAV4"]}, {"Results": "Camry"}],
    )
    async def test_malformed_payload(self, lookup, vpic, body):
        vpic.body = body
        with pytest.raises(ServiceLookupError) as exc:
            await lookup.list_models_for_make_year("Toyota", 2020)
        assert exc.value.message == "Failed to fetch models"

    @pytest.mark.asyncio
    async def test_rows_without_names(self, lookup, vpic):
        vpic.body = {"Results": [{"Model_Name": None}, {"Model_ID": 1}]}
        with pytest.raises(ServiceLookupError, match="No models found"):
            await lookup.list_models_for_make_year("Toyota", 2020)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("make,year", [("", 2020), ("Toyota", 1800)])
    async def test_invalid_input_never_hits_network(self, lookup, vpic, make, year):
        with pytest.raises(ValidationError, match="Invalid make or year selected"):
            await lookup.list_models_for_make_year(make, year)
        assert vpic.requests == []


class TestDecodeVin:
    @pytest.mark.asyncio
    async def test_decodes_record(self, lookup, vpic):
        record = await lookup.decode_vin(HONDA_VIN)

        assert record.year == 2003
        assert record.make == "HONDA"
        assert record.model == "Accord"
        assert record.trim == "EX-V6"
        assert record.engine_size == "3.0"
        assert record.drivetrain == "FWD/Front-Wheel Drive"
        assert record.price is None
        assert vpic.requests[0].url.path.endswith(f"/DecodeVinValues/{HONDA_VIN}")

    @pytest.mark.asyncio
    async def test_blank_fields_become_absent(self, lookup, vpic):
        vin = "5YJ3E1EA7KF000001"
        vpic.vins[vin] = {
            "ErrorCode": "0",
            "ModelYear": "2019",
            "Make": "TESLA",
            "Model": "Model 3",
            "Trim": "",
            "DisplacementL": "",
            "TransmissionStyle": "",
            "DriveType": "RWD/Rear-Wheel Drive",
        }
        record = await lookup.decode_vin(vin)
        assert record.trim is None
        assert record.engine_size is None
        assert record.transmission is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("vin", ["", "SHORTVIN", HONDA_VIN + "X"])
    async def test_bad_length_rejected_before_request(self, lookup, vpic, vin):
        with pytest.raises(ValidationError, match="17-character VIN"):
            await lookup.decode_vin(vin)
        assert vpic.requests == []

    @pytest.mark.asyncio
    async def test_service_error_code(self, lookup):
        with pytest.raises(ServiceLookupError) as exc:
            await lookup.decode_vin("1FTFW1ET5DFC10312")
        assert exc.value.message == "11 - Incorrect Model Year"

    @pytest.mark.asyncio
    async def test_error_code_without_text(self, lookup, vpic):
        vpic.vins["1FTFW1ET5DFC10312"] = {"ErrorCode": "6", "ErrorText": ""}
        with pytest.raises(ServiceLookupError, match="Invalid VIN"):
            await lookup.decode_vin("1FTFW1ET5DFC10312")

    @pytest.mark.asyncio
    async def test_http_failure(self, lookup, vpic):
        vpic.status_code = 500
        with pytest.raises(ServiceLookupError, match="Failed to decode VIN"):
            await lookup.decode_vin(HONDA_VIN)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [["unexpected"], {"Results": ["row"]}, "text"])
    async def test_malformed_payload(self, lookup, vpic, body):
        vpic.body = body
        with pytest.raises(ServiceLookupError, match="Failed to decode VIN"):
            await lookup.decode_vin(HONDA_VIN)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides", [{"Make": ""}, {"Model": ""}, {"ModelYear": "1850"}, {"ModelYear": ""}]
    )
    async def test_unusable_record_is_rejected_whole(self, lookup, vpic, overrides):
        vpic.vins[HONDA_VIN] = {**vpic.vins[HONDA_VIN], **overrides}
        with pytest.raises(ServiceLookupError, match="Failed to decode VIN"):
            await lookup.decode_vin(HONDA_VIN)


class TestGenerateDescription:
    vehicle = VehicleRecord(year=2020, make="Toyota", model="Camry", price=18500)

    @pytest.mark.asyncio
    async def test_returns_completion_text(self, lookup, completions):
        text = await lookup.generate_description(self.vehicle, 42000, "Good", "One owner")

        assert text == "A great car."
        payload = completions.payloads[0]
        assert payload["model"] == "openai/gpt-4-turbo"
        assert len(payload["messages"]) == 1
        assert payload["messages"][0]["role"] == "user"
        assert "Specifications:" in completions.last_prompt

    @pytest.mark.asyncio
    async def test_short_mode(self, lookup, completions):
        await lookup.generate_description(self.vehicle, 42000, "Good", "", "short")
        assert "Facebook Marketplace" in completions.last_prompt

    @pytest.mark.asyncio
    async def test_missing_api_key(self, unconfigured_lookup, completions):
        with pytest.raises(ConfigurationError) as exc:
            await unconfigured_lookup.generate_description(self.vehicle, 1000, "Good", "")
        assert "API key" in exc.value.message
        assert completions.payloads == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("miles,condition", [(-1, "Good"), (1000, "Mint")])
    async def test_invalid_input(self, lookup, completions, miles, condition):
        with pytest.raises(ValidationError):
            await lookup.generate_description(self.vehicle, miles, condition, "")
        assert completions.payloads == []

    @pytest.mark.asyncio
    async def test_empty_completion_falls_back(self, lookup, completions):
        completions.text = None
        text = await lookup.generate_description(self.vehicle, 1000, "Good", "")
        assert text == NO_TEXT_FALLBACK

    @pytest.mark.asyncio
    async def test_service_failure(self, lookup, completions):
        completions.status_code = 500
        with pytest.raises(GenerationError, match="Failed to generate description"):
            await lookup.generate_description(self.vehicle, 1000, "Good", "")


def test_common_colors():
    colors = common_colors()
    assert len(colors["exterior"]) == 16
    assert len(colors["interior"]) == 9
    colors["exterior"].clear()
    assert common_colors()["exterior"]
