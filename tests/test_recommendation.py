import json

import pytest
import requests

from rentalhq.services import recommendation_service
from rentalhq.services.recommendation_service import (
    CATALOG_TOOL, RecommendationCriteria, RecommendationUnavailable, find_generator, parse_result,
)


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        return self.payload


def tool_call_response():
    return {'candidates': [{'content': {'role': 'model', 'parts': [
        {'functionCall': {'name': CATALOG_TOOL, 'args': {}}},
    ]}}]}


def text_response(text):
    return {'candidates': [{'content': {'role': 'model', 'parts': [{'text': text}]}}]}


@pytest.fixture
def criteria():
    return RecommendationCriteria(use_case='Industrial', power_needs=1200, budget='Standard')


@pytest.fixture
def generators(store):
    return store.read().generators


def test_tool_round_then_answer(monkeypatch, criteria, generators):
    replies = [
        FakeResponse(tool_call_response()),
        FakeResponse(text_response('```json\n{"generatorId": "M001", "reasoning": "1500 kW covers the load."}\n```')),
    ]
    calls = []

    def fake_post(url, params=None, json=None, headers=None, timeout=None):
        calls.append({'url': url, 'params': params, 'json': json, 'timeout': timeout})
        return replies.pop(0)

    monkeypatch.setattr(requests, 'post', fake_post)
    recommendation = find_generator(criteria, generators, api_key='k', model='gemini-test', timeout=5)

    assert recommendation
    assert recommendation.generator.id == 'M001'
    assert recommendation.reasoning == '1500 kW covers the load.'
    assert len(calls) == 2
    assert 'gemini-test:generateContent' in calls[0]['url']
    assert calls[0]['params'] == {'key': 'k'}
    assert calls[0]['timeout'] == 5

    second_turn = calls[1]['json']['contents']
    assert [turn['role'] for turn in second_turn] == ['user', 'model', 'user']
    function_response = second_turn[2]['parts'][0]['functionResponse']
    assert function_response['name'] == CATALOG_TOOL
    catalog_ids = [g['id'] for g in function_response['response']['catalog']]
    assert catalog_ids == ['M001', 'M002', 'M003', 'M004']


def test_prompt_carries_criteria(monkeypatch, criteria, generators):
    seen = {}

    def fake_post(url, **kwargs):
        seen['prompt'] = kwargs['json']['contents'][0]['parts'][0]['text']
        return FakeResponse(text_response('{"generatorId": null, "reasoning": "Nothing fits."}'))

    monkeypatch.setattr(requests, 'post', fake_post)
    recommendation = find_generator(criteria, generators, api_key='k', model='m')
    assert not recommendation
    assert recommendation.reasoning == 'Nothing fits.'
    assert 'Industrial' in seen['prompt']
    assert '1200 kW' in seen['prompt']


def test_unknown_generator_id_is_no_match(monkeypatch, criteria, generators):
    monkeypatch.setattr(requests, 'post', lambda url, **kw: FakeResponse(
        text_response(json.dumps({'generatorId': 'M999', 'reasoning': 'Imaginary model.'}))))
    assert find_generator(criteria, generators, api_key='k', model='m').generator is None


def test_network_failure(monkeypatch, criteria, generators):
    def fake_post(url, **kwargs):
        raise requests.exceptions.ConnectionError('offline')

    monkeypatch.setattr(requests, 'post', fake_post)
    with pytest.raises(RecommendationUnavailable):
        find_generator(criteria, generators, api_key='k', model='m')


def test_http_error(monkeypatch, criteria, generators):
    monkeypatch.setattr(requests, 'post', lambda url, **kw: FakeResponse({}, status_code=503))
    with pytest.raises(RecommendationUnavailable):
        find_generator(criteria, generators, api_key='k', model='m')


def test_endless_tool_calls_give_up(monkeypatch, criteria, generators):
    calls = []

    def fake_post(url, **kwargs):
        calls.append(1)
        return FakeResponse(tool_call_response())

    monkeypatch.setattr(requests, 'post', fake_post)
    with pytest.raises(RecommendationUnavailable):
        find_generator(criteria, generators, api_key='k', model='m')
    assert len(calls) == recommendation_service.MAX_TOOL_ROUNDS


def test_missing_api_key(criteria, generators):
    with pytest.raises(RecommendationUnavailable):
        find_generator(criteria, generators, api_key=None, model='m')


def test_parse_result_rejects_prose():
    with pytest.raises(RecommendationUnavailable):
        parse_result('I think the Cummins is great.')
