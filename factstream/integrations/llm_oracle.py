import json
import logging
import time
from flask import current_app
from factstream.exceptions import OracleUnavailableError
from factstream.integrations.oracle import OracleVerdict, VerificationOracle, VERDICT_STATUS
from factstream.utils.text import is_http_url

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a crisis-information fact checker. Assess the user's claim and answer with a JSON "
    "object only, with keys: verdict (one of: true, false, partially-true, unverified), "
    "confidence (integer 0-100), summary (one or two sentences correcting or confirming the claim), "
    "context (why this matters), sources (list of {name, url, credibility} where credibility is "
    "high, medium or low), related_claims (list of short descriptions of similar claims). "
    "Use 'unverified' when the evidence is not yet sufficient."
)


class LLMOracle(VerificationOracle):
    """Oracle backed by an OpenAI chat model returning a JSON verdict."""
    name = 'llm'

    def __init__(self, app_config=None):
        config = app_config or current_app.config
        self.api_key = config.get('OPENAI_API_KEY')
        self.model = config.get('LLM_MODEL', 'gpt-4.1-mini')
        self.timeout = config.get('LLM_TIMEOUT_SECONDS', 20)

    def check(self, text, context=None):
        if not self.api_key:
            raise OracleUnavailableError('OPENAI_API_KEY not configured', operation='oracle_check')

        messages = [
            {'role': 'system', 'content': SYSTEM_PROMPT},
            {'role': 'user', 'content': self._build_prompt(text, context or {})},
        ]
        content = self._call_openai(messages)
        return self._parse(content)

    def _build_prompt(self, text, context):
        lines = [f"Claim: {text}"]
        if context.get('location'):
            lines.append(f"Location: {context['location']}")
        if context.get('urgency'):
            lines.append(f"Reported urgency: {context['urgency']}")
        return '\n'.join(lines)

    def _call_openai(self, messages):
        import openai
        client = openai.OpenAI(api_key=self.api_key, timeout=self.timeout)

        start_ms = int(time.time() * 1000)
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=messages,
                response_format={'type': 'json_object'},
            )
        except openai.OpenAIError as e:
            logger.error(f"OpenAI verification call failed: {e}")
            raise OracleUnavailableError(f"Verification oracle unreachable: {e}", operation='oracle_check')

        logger.info(f"LLM verdict in {int(time.time() * 1000) - start_ms}ms ({self.model})")
        return response.choices[0].message.content

    def _parse(self, content):
        try:
            data = json.loads(content or '')
            verdict = str(data.get('verdict', '')).strip().lower()
            if verdict not in VERDICT_STATUS:
                raise ValueError(f"unknown verdict {verdict!r}")
            sources = [
                {
                    'name': str(s['name']),
                    'url': str(s['url']),
                    'credibility': str(s.get('credibility', 'low')).lower(),
                }
                for s in data.get('sources') or []
                if isinstance(s, dict) and s.get('name') and is_http_url(s.get('url'))
            ]
            related = data.get('related_claims')
            if not isinstance(related, list):
                related = []
            return OracleVerdict(
                verdict=verdict,
                confidence=int(data.get('confidence', 0)),
                correction=str(data.get('summary') or ''),
                context=str(data['context']) if data.get('context') else None,
                sources=sources,
                related_claims=[str(c) for c in related if c],
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Unusable LLM verdict: {e}")
            raise OracleUnavailableError(f"Verification oracle returned an unusable answer: {e}",
                                         operation='oracle_check')
