import logging
from typing import Optional

from documents.errors import GenerationFailure

logger = logging.getLogger(__name__)


class BaseProvider:
    name = "base"
    default_model = ""

    def __init__(self, keys: dict):
        self.keys = keys or {}

    def _key(self) -> str:
        api_key = self.keys.get(self.name)
        if not api_key:
            raise GenerationFailure(f"{self.name.capitalize()} API key missing")
        return api_key

    def _complete(self, model: str, system: str, user: str, temperature: float, max_tokens: int, json_mode: bool) -> str:
        raise NotImplementedError

    def chat(self, model: Optional[str], system: str, user: str, temperature: float, max_tokens: int,
             json_mode: bool = False) -> str:
        model = model or self.default_model
        logger.info("Calling %s model %s (json=%s)", self.name, model, json_mode)
        try:
            out = self._complete(model, system, user, temperature, max_tokens, json_mode)
        except GenerationFailure:
            raise
        except Exception as e:
            logger.warning("%s call failed: %s", self.name, str(e)[:300])
            raise GenerationFailure(f"The {self.name} model call failed: {e}") from e
        if not (out or "").strip():
            raise GenerationFailure(f"The {self.name} model returned an empty response.")
        logger.debug("Raw %s output: %s", self.name, out)
        return out


class GeminiProvider(BaseProvider):
    name = "gemini"
    default_model = "gemini-1.5-flash"

    def _complete(self, model, system, user, temperature, max_tokens, json_mode):
        import google.generativeai as genai
        genai.configure(api_key=self._key())
        generation_config = {"temperature": temperature, "max_output_tokens": max_tokens}
        if json_mode:
            generation_config["response_mime_type"] = "application/json"
        gmodel = genai.GenerativeModel(model, system_instruction=system)
        resp = gmodel.generate_content(user, generation_config=generation_config)
        if not resp.candidates or not resp.candidates[0].content.parts:
            reason = "UNKNOWN"
            if resp.candidates and hasattr(resp.candidates[0].finish_reason, "name"):
                reason = resp.candidates[0].finish_reason.name
            raise GenerationFailure(f"The model returned an empty response (Finish Reason: {reason}).")
        return resp.text or ""


class OpenAIProvider(BaseProvider):
    name = "openai"
    default_model = "gpt-4o-mini"

    def _complete(self, model, system, user, temperature, max_tokens, json_mode):
        from openai import OpenAI
        client = OpenAI(api_key=self._key())
        resp = client.chat.completions.create(
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            response_format={"type": "json_object"} if json_mode else {"type": "text"},
            messages=[
                {"role":"system","content":system},
                {"role":"user","content":user},
            ],
        )
        return resp.choices[0].message.content or ""


class AnthropicProvider(BaseProvider):
    name = "anthropic"
    default_model = "claude-3-haiku-20240307"

    def _complete(self, model, system, user, temperature, max_tokens, json_mode):
        import anthropic
        client = anthropic.Anthropic(api_key=self._key())
        if json_mode:
            system = system + "\n\nReturn ONLY the JSON object. No markdown, no explanation."
        msg = client.messages.create(
            model=model,
            system=system,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role":"user","content":user}],
        )
        out = []
        for block in msg.content:
            if getattr(block, "type", "") == "text":
                out.append(block.text)
        return "\n".join(out)
