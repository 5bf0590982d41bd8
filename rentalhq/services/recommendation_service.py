"""
AI generator recommendation backed by the Gemini REST API.

The model gets the customer's requirements and a ``getGeneratorCatalog``
function it can call. When it calls the function we answer with the live
catalog, and its final answer must be a JSON object
``{"generatorId": ..., "reasoning": ...}``. No state, no retries.
"""
import json
import re
from typing import List, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rentalhq.models.records import Generator
from rentalhq.services.validation_service import log_event

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
CATALOG_TOOL = "getGeneratorCatalog"
MAX_TOOL_ROUNDS = 3

_JSON_OBJECT = re.compile(r'\{.*\}', re.DOTALL)


class RecommendationUnavailable(RuntimeError):
    pass


class RecommendationCriteria(BaseModel):
    use_case: str = Field(min_length=1)
    power_needs: float = Field(ge=1)
    budget: str = Field(min_length=1)


class RecommendationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    generator_id: Optional[str] = Field(default=None, alias='generatorId')
    reasoning: str = ''


class Recommendation:
    def __init__(self, generator, reasoning):
        self.generator = generator
        self.reasoning = reasoning

    def __bool__(self):
        return self.generator is not None


def catalog_for_tool(generators: List[Generator]) -> list:
    return [
        {
            'id': g.id,
            'name': g.name,
            'capacity': g.capacity,
            'pricePerDay': g.price_per_day,
            'fuelType': g.fuel_type,
        }
        for g in generators
    ]


def build_prompt(criteria: RecommendationCriteria) -> str:
    return f"""You are an expert assistant for a generator rental company. Your task is to recommend the best generator for a customer based on their needs.

Here are the customer's requirements:
- Use Case: {criteria.use_case}
- Power Needs: {criteria.power_needs:g} kW
- Daily Budget: {criteria.budget}

First, use the {CATALOG_TOOL} tool to see the list of available generators.
Then, analyze the catalog and find the single best match for the customer.
Consider the power capacity (it should be equal to or greater than the customer's needs) and the price per day (it should align with their budget).
Prioritize meeting the power needs first, then find the most cost-effective option within their budget.

Answer ONLY with a JSON object of the form {{"generatorId": "<id or null>", "reasoning": "<short explanation>"}}. If no generator meets the criteria, set generatorId to null and explain why."""


def _tool_declaration() -> dict:
    return {
        'functionDeclarations': [{
            'name': CATALOG_TOOL,
            'description': 'Returns a list of all available generators for rent.',
        }]
    }


def _parts(response_json: dict) -> list:
    candidates = response_json.get('candidates') or [{}]
    return candidates[0].get('content', {}).get('parts', []) or []


def parse_result(text: str) -> RecommendationResult:
    match = _JSON_OBJECT.search(text or '')
    if not match:
        raise RecommendationUnavailable("The AI service did not return a recommendation.")
    try:
        return RecommendationResult.model_validate(json.loads(match.group(0)))
    except (ValueError, ValidationError) as e:
        raise RecommendationUnavailable(f"Unreadable AI answer: {e}")


def request_recommendation(criteria: RecommendationCriteria, generators: List[Generator],
                           api_key: str, model: str, timeout: int = 30) -> RecommendationResult:
    """Runs the prompt/tool exchange with Gemini and returns the parsed answer."""
    if not api_key:
        raise RecommendationUnavailable("API key not configured.")

    api_url = GEMINI_URL.format(model=model)
    contents = [{'role': 'user', 'parts': [{'text': build_prompt(criteria)}]}]

    for _ in range(MAX_TOOL_ROUNDS):
        payload = {'contents': contents, 'tools': [_tool_declaration()]}
        try:
            response = requests.post(
                api_url,
                params={'key': api_key},
                json=payload,
                headers={'Content-Type': 'application/json'},
                timeout=timeout,
            )
            response.raise_for_status()
            result = response.json()
        except requests.exceptions.RequestException as e:
            raise RecommendationUnavailable(f"The AI service is unavailable: {e}")
        except ValueError as e:
            raise RecommendationUnavailable(f"The AI service returned invalid JSON: {e}")

        parts = _parts(result)
        calls = [p['functionCall'] for p in parts if 'functionCall' in p]
        if not calls:
            text = ''.join(p.get('text', '') for p in parts)
            return parse_result(text)

        contents.append({'role': 'model', 'parts': parts})
        responses = []
        for call in calls:
            if call.get('name') == CATALOG_TOOL:
                body = {'catalog': catalog_for_tool(generators)}
            else:
                body = {'error': f"Unknown tool {call.get('name')}"}
            responses.append({'functionResponse': {'name': call.get('name'), 'response': body}})
        contents.append({'role': 'user', 'parts': responses})

    raise RecommendationUnavailable("The AI service did not finish its answer.")


def find_generator(criteria: RecommendationCriteria, generators: List[Generator],
                   api_key: str, model: str, timeout: int = 30) -> Recommendation:
    """Returns the recommended generator (or None) with the model's reasoning."""
    result = request_recommendation(criteria, generators, api_key, model, timeout)
    generator = None
    if result.generator_id:
        generator = next((g for g in generators if g.id == result.generator_id), None)
    log_event("AI Recommendation", "SUCCESS" if generator else "NO_MATCH", {
        "use_case": criteria.use_case,
        "power_needs": criteria.power_needs,
        "budget": criteria.budget,
        "generator_id": result.generator_id,
    })
    return Recommendation(generator, result.reasoning)
