"""
Pytest Configuration and Fixtures

In-memory stand-ins for the Gemini backend and the host credential flow.
"""

import asyncio

import pytest

from studio import metrics
from studio.campaign.credentials import CredentialGate
from studio.campaign.orchestrator import CampaignOrchestrator


MODEL_IMAGE = "data:image/png;base64,TU9ERUw="
PRODUCT_IMAGE = "data:image/jpeg;base64,UFJPRFVDVA=="


def make_raw_plan(count: int = 10) -> list:
    return [
        {
            "title": f"Shot {i + 1}",
            "visualDescription": f"85mm, rim light, model by the window, frame {i + 1}",
        }
        for i in range(count)
    ]


class FakeBackend:
    """
    Scriptable backend.

    Plan calls return ``plan_result`` or raise ``plan_error``. Preview calls
    consume ``queue_preview`` steps in order; a step with a gate waits for
    the gate before settling, which lets tests choose completion order.
    """

    def __init__(self):
        self.plan_result = make_raw_plan()
        self.plan_error = None
        self.plan_calls = []
        self.preview_calls = []
        self._preview_steps = []
        self.on_plan = None
        self.events = None

    async def plan_shots(self, product_image, prompt, system_instruction, response_schema):
        self.plan_calls.append({
            "product_image": product_image,
            "prompt": prompt,
            "system_instruction": system_instruction,
            "response_schema": response_schema,
        })
        if self.events is not None:
            self.events.append("plan")
        if self.on_plan:
            self.on_plan()
        if self.plan_error is not None:
            raise self.plan_error
        return self.plan_result

    def queue_preview(self, result, gate: asyncio.Event = None):
        self._preview_steps.append((result, gate))

    async def synthesize_image(self, model_image, product_image, prompt):
        self.preview_calls.append({
            "model_image": model_image,
            "product_image": product_image,
            "prompt": prompt,
        })
        if self._preview_steps:
            result, gate = self._preview_steps.pop(0)
        else:
            result, gate = f"data:image/png;base64,cHJldmlldw{len(self.preview_calls)}", None
        if gate is not None:
            await gate.wait()
        if isinstance(result, BaseException):
            raise result
        return result

    async def wait_for_preview_calls(self, count: int):
        while len(self.preview_calls) < count:
            await asyncio.sleep(0)


class FakeCredentialProvider:
    def __init__(self, available: bool = True):
        self.available = available
        self.probe_calls = 0
        self.select_calls = 0
        self.select_error = None
        self.select_gate = None
        self.events = None

    async def probe(self) -> bool:
        self.probe_calls += 1
        return self.available

    async def select(self) -> None:
        self.select_calls += 1
        if self.events is not None:
            self.events.append("select")
        if self.select_gate is not None:
            await self.select_gate.wait()
        if self.select_error is not None:
            raise self.select_error


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def provider():
    return FakeCredentialProvider()


@pytest.fixture
def orchestrator(backend, provider):
    """Orchestrator with a known-good credential and both images set."""
    gate = CredentialGate(provider, initial=True)
    orch = CampaignOrchestrator(backend, credentials=gate)
    orch.update_request(model_image=MODEL_IMAGE, product_image=PRODUCT_IMAGE)
    return orch
