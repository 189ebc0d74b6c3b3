from __future__ import annotations

from typing import Any

import pytest

from opportunity_client.controllers import (
    CreateSubmissionController,
    OptionsStatus,
    SubmitStatus,
)
from opportunity_client.models import Account, OpportunityDraft
from opportunity_client.remote import ConnectivityError, HttpError, RemoteClient

_STAGES = ["Prospecting", "Qualification", "Closed Won"]
_ACCOUNTS = [{"Id": "001A", "Name": "Acme"}, {"Id": "001B", "Name": "Globex"}]


class ScriptedRemoteClient(RemoteClient):
    def __init__(self, responses: dict[tuple[str, str], Any]) -> None:
        self.responses = responses
        self.calls: list[tuple[str, str, Any]] = []

    async def request(self, method: str, path: str, body: Any | None = None) -> Any:
        self.calls.append((method, path, body))
        result = self.responses[(method, path)]
        if isinstance(result, Exception):
            raise result
        return result

    def posts(self) -> list[Any]:
        return [body for method, _, body in self.calls if method == "POST"]


def _client(**overrides: Any) -> ScriptedRemoteClient:
    responses: dict[tuple[str, str], Any] = {
        ("GET", "/api/opportunities/stagenames"): list(_STAGES),
        ("GET", "/api/opportunities/accounts"): list(_ACCOUNTS),
        ("POST", "/api/opportunities"): {"id": "006NEW", "name": "Big deal"},
    }
    for key, value in overrides.items():
        method, _, path = key.partition(" ")
        responses[(method, path)] = value
    return ScriptedRemoteClient(responses)


async def _ready_controller(client: ScriptedRemoteClient) -> CreateSubmissionController:
    controller = CreateSubmissionController(client)
    state = await controller.activate()
    assert state.options_status is OptionsStatus.READY
    return controller


def _fill(controller: CreateSubmissionController, **overrides: Any) -> None:
    values: dict[str, Any] = {
        "name": "Big deal",
        "amount": "1500.50",
        "stageName": "Qualification",
        "closeDate": "2026-03-30",
        "accountId": "001B",
        "description": "Renewal",
    }
    values.update(overrides)
    for name, value in values.items():
        controller.update_field(name, value)


@pytest.mark.asyncio
async def test_activate_loads_stage_names_and_accounts() -> None:
    client = _client()
    controller = CreateSubmissionController(client)

    assert controller.state.options_status is OptionsStatus.LOADING

    state = await controller.activate()

    assert state.options_status is OptionsStatus.READY
    assert state.stage_names == tuple(_STAGES)
    assert state.accounts == (Account(id="001A", name="Acme"), Account(id="001B", name="Globex"))
    assert state.options_error is None
    assert sorted(path for _, path, _ in client.calls) == [
        "/api/opportunities/accounts",
        "/api/opportunities/stagenames",
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"records": []}, None, "not a list"])
async def test_non_list_accounts_response_is_tolerated(payload: Any) -> None:
    controller = CreateSubmissionController(_client(**{"GET /api/opportunities/accounts": payload}))

    state = await controller.activate()

    assert state.options_status is OptionsStatus.READY
    assert state.accounts == ()
    assert state.stage_names == tuple(_STAGES)


@pytest.mark.asyncio
async def test_option_failure_names_the_failing_fetch() -> None:
    client = _client(**{"GET /api/opportunities/accounts": HttpError(500, "Accounts unavailable")})
    controller = CreateSubmissionController(client)

    state = await controller.activate()

    assert state.options_status is OptionsStatus.ERROR
    assert state.options_error == "Error fetching accounts: Accounts unavailable"
    assert state.accounts == ()


@pytest.mark.asyncio
async def test_stage_name_failure_is_reported_first() -> None:
    client = _client(
        **{
            "GET /api/opportunities/stagenames": ConnectivityError("http://localhost:5000"),
            "GET /api/opportunities/accounts": HttpError(500, ""),
        }
    )
    controller = CreateSubmissionController(client)

    state = await controller.activate()

    assert state.options_status is OptionsStatus.ERROR
    assert state.options_error.startswith("Error fetching stage names: Cannot reach the server")


@pytest.mark.asyncio
async def test_options_can_be_reloaded_after_error() -> None:
    client = _client(**{"GET /api/opportunities/stagenames": HttpError(503, "")})
    controller = CreateSubmissionController(client)
    await controller.activate()

    client.responses[("GET", "/api/opportunities/stagenames")] = ["Prospecting"]
    state = await controller.load_options()

    assert state.options_status is OptionsStatus.READY
    assert state.stage_names == ("Prospecting",)


@pytest.mark.asyncio
async def test_update_field_assigns_without_validation() -> None:
    controller = await _ready_controller(_client())

    controller.update_field("amount", "not a number yet")
    controller.update_field("stageName", "Anything")
    controller.update_field("account_id", "001Z")

    draft = controller.state.draft
    assert draft.amount == "not a number yet"
    assert draft.stage_name == "Anything"
    assert draft.account_id == "001Z"
    assert controller.state.submit_status is SubmitStatus.IDLE

    with pytest.raises(KeyError):
        controller.update_field("accountName", "Acme")


@pytest.mark.asyncio
async def test_invalid_amount_fails_before_any_request() -> None:
    client = _client()
    controller = await _ready_controller(client)
    _fill(controller, amount="abc")
    draft_before = controller.state.draft

    result = await controller.submit()

    assert result is None
    assert client.posts() == []
    assert controller.state.submit_status is SubmitStatus.ERROR
    assert controller.state.submit_error == "invalid amount"
    assert controller.state.draft == draft_before


@pytest.mark.asyncio
async def test_successful_submission_sends_wire_payload_and_resets_draft() -> None:
    client = _client()
    controller = await _ready_controller(client)
    _fill(controller)
    statuses: list[SubmitStatus] = []
    controller.subscribe(lambda state: statuses.append(state.submit_status))

    created = await controller.submit()

    assert created == {"id": "006NEW", "name": "Big deal"}
    assert client.posts() == [
        {
            "name": "Big deal",
            "amount": 1500.5,
            "stageName": "Qualification",
            "closeDate": "2026-03-30",
            "AccountId": "001B",
            "description": "Renewal",
        }
    ]
    assert controller.state.submit_status is SubmitStatus.SUCCESS
    assert controller.state.submit_error is None
    assert controller.state.draft == OpportunityDraft()
    assert statuses[0] is SubmitStatus.SUBMITTING
    assert statuses[-1] is SubmitStatus.SUCCESS


@pytest.mark.asyncio
async def test_failed_submission_keeps_draft_and_surfaces_body() -> None:
    client = _client(**{"POST /api/opportunities": HttpError(400, "Invalid stage")})
    controller = await _ready_controller(client)
    _fill(controller)
    draft_before = controller.state.draft

    result = await controller.submit()

    assert result is None
    assert controller.state.submit_status is SubmitStatus.ERROR
    assert controller.state.submit_error == "Invalid stage"
    assert controller.state.draft == draft_before


@pytest.mark.asyncio
async def test_failed_submission_without_body_uses_generic_message() -> None:
    client = _client(**{"POST /api/opportunities": HttpError(500, "  ")})
    controller = await _ready_controller(client)
    _fill(controller)

    await controller.submit()

    assert controller.state.submit_error == "Failed to create opportunity"


@pytest.mark.asyncio
async def test_resubmission_after_error_clears_previous_error() -> None:
    client = _client(**{"POST /api/opportunities": HttpError(400, "Invalid stage")})
    controller = await _ready_controller(client)
    _fill(controller, stageName="Closed Won")
    await controller.submit()
    assert controller.state.submit_error == "Invalid stage"

    client.responses[("POST", "/api/opportunities")] = {"id": "006NEW"}
    controller.update_field("stageName", "Prospecting")
    await controller.submit()

    assert controller.state.submit_status is SubmitStatus.SUCCESS
    assert controller.state.submit_error is None
    assert client.posts()[-1]["stageName"] == "Prospecting"


@pytest.mark.asyncio
async def test_submit_is_ignored_until_options_are_ready() -> None:
    client = _client(**{"GET /api/opportunities/accounts": HttpError(500, "down")})
    controller = CreateSubmissionController(client)
    _fill(controller)

    assert await controller.submit() is None

    await controller.activate()
    _fill(controller)
    assert await controller.submit() is None
    assert client.posts() == []
    assert controller.state.submit_status is SubmitStatus.IDLE


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"name": "  "}, "name is required"),
        ({"closeDate": ""}, "close date is required"),
        ({"stageName": "NotAStage"}, "unknown stage: 'NotAStage'"),
        ({"accountId": "999Z"}, "unknown account: '999Z'"),
    ],
)
async def test_draft_rules_are_checked_before_any_request(
    overrides: dict[str, Any], message: str
) -> None:
    client = _client()
    controller = await _ready_controller(client)
    _fill(controller, **overrides)
    draft_before = controller.state.draft

    result = await controller.submit()

    assert result is None
    assert client.posts() == []
    assert controller.state.submit_status is SubmitStatus.ERROR
    assert controller.state.submit_error == message
    assert controller.state.draft == draft_before


@pytest.mark.asyncio
async def test_account_check_fails_when_accounts_response_was_malformed() -> None:
    client = _client(**{"GET /api/opportunities/accounts": {"records": []}})
    controller = await _ready_controller(client)
    _fill(controller)

    await controller.submit()

    assert client.posts() == []
    assert controller.state.submit_error == "unknown account: '001B'"
