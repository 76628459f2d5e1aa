"""LLM 클라이언트 (모델 폴백 + Rate Limit 처리)

쿼리 확장과 요약에 사용한다.
"""

import logging
import math
import random
import re
import time
from threading import Lock
from typing import Optional

from groq import APIConnectionError, APIError, Groq, RateLimitError

from searcher.errors import DependencyUnavailableError

logger = logging.getLogger(__name__)

# 폴백 순서
FALLBACK_MODELS = [
    "llama-3.3-70b-versatile",
    "meta-llama/llama-4-maverick-17b-128e-instruct",
    "openai/gpt-oss-120b",
    "moonshotai/kimi-k2-instruct",
]

EXPAND_SYSTEM_PROMPT = (
    "You are a helpful assistant that specializes in {language} language and "
    "understands search query expansion. Provide only the expanded terms without explanations."
)

EXPAND_PROMPT = """Given the search query "{query}" in {language}, expand it to include:
1. Synonyms and related terms
2. Alternative spellings or expressions
3. Contextually similar concepts

Return only the expanded search terms as a comma-separated list, including the original query."""

SUMMARY_SYSTEM_PROMPT = (
    "You are a helpful assistant that creates concise summaries while preserving "
    "key information and context."
)

SUMMARY_PROMPT = """Summarize the following content in {max_length} characters or less, preserving the main ideas and important keywords:

{content}"""


def clean_response(text: Optional[str]) -> str:
    """<think> 블록과 코드 펜스 제거"""
    clean_text = re.sub(r"<think>.*?</think>", "", text or "", flags=re.DOTALL).strip()

    if clean_text.startswith("```"):
        lines = clean_text.split("\n")
        clean_text = "\n".join(lines[1:-1] if lines[-1].strip() == "```" else lines[1:])

    return clean_text.strip()


def parse_terms(text: str) -> list[str]:
    """쉼표로 구분된 검색어 목록 파싱 (빈 항목 제외)"""
    return [term.strip() for term in text.split(",") if term.strip()]


class LLMClient:
    """Groq LLM 클라이언트 (폴백 + Rate Limit 처리)"""

    def __init__(
        self,
        models: Optional[list[str]] = None,
        max_retries: int = 3,
        base_delay: float = 1.0,
        client: Optional[Groq] = None,
    ):
        self.client = client or Groq()  # GROQ_API_KEY 환경변수 사용
        self.models = models or FALLBACK_MODELS
        self.max_retries = max_retries
        self.base_delay = base_delay

        # 모델별 rate limit 상태 추적
        self._rate_limited_until: dict[str, float] = {}
        self._lock = Lock()

    def _is_rate_limited(self, model: str) -> bool:
        """모델이 현재 rate limit 상태인지 확인"""
        with self._lock:
            if model not in self._rate_limited_until:
                return False
            return time.time() < self._rate_limited_until[model]

    def _call_model_with_retry(
        self,
        model: str,
        messages: list[dict],
        max_tokens: int,
        temperature: float,
    ) -> tuple[Optional[str], Optional[str]]:
        """단일 모델 호출 (재시도 포함)

        Returns:
            (response_text, error_message)
        """
        if self._is_rate_limited(model):
            return None, "Rate limited"

        for attempt in range(self.max_retries):
            try:
                params = {
                    "model": model,
                    "messages": messages,
                    "temperature": temperature,
                    "max_tokens": max_tokens,
                }
                response = self.client.chat.completions.create(**params)  # type: ignore
                return clean_response(response.choices[0].message.content), None

            except RateLimitError as e:
                # "retry after X" 패턴에서 대기 시간 추출
                retry_after = 60
                error_msg = str(e)
                match = re.search(r"retry after (\d+)", error_msg.lower())
                if match:
                    retry_after = int(match.group(1))

                with self._lock:
                    self._rate_limited_until[model] = time.time() + retry_after
                logger.warning(f"{model} rate limit, {retry_after}초 대기 필요")

                # 검색 요청 중이므로 오래 기다리지 않고 다음 모델로
                return None, f"Rate limit: {error_msg}"

            except APIConnectionError as e:
                wait_time = (2**attempt) * self.base_delay + random.uniform(0, self.base_delay)
                logger.warning(f"연결 에러: {e}, {wait_time:.1f}초 후 재시도...")
                time.sleep(wait_time)

            except APIError as e:
                status_code = getattr(e, "status_code", None)
                if status_code and status_code >= 500:
                    wait_time = (2**attempt) * self.base_delay + random.uniform(0, self.base_delay)
                    logger.warning(f"서버 에러 ({status_code}), {wait_time:.1f}초 후 재시도...")
                    time.sleep(wait_time)
                else:
                    return None, str(e)

        return None, "최대 재시도 횟수 초과"

    def complete(
        self,
        system: str,
        prompt: str,
        max_tokens: int = 200,
        temperature: float = 0.3,
    ) -> str:
        """채팅 완성 (모델 순서대로 폴백)

        Raises:
            DependencyUnavailableError: 모든 모델 실패
        """
        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ]

        last_error = None
        for model in self.models:
            text, error = self._call_model_with_retry(model, messages, max_tokens, temperature)
            if text:
                return text
            last_error = error or "빈 응답"
            logger.debug(f"{model} 실패: {last_error}")

        raise DependencyUnavailableError("llm", last_error or "사용 가능한 모델이 없습니다")

    def expand_query(self, query: str, language: str = "burmese") -> list[str]:
        """검색어 확장 (동의어, 대체 표기, 관련 개념)

        실패하면 [query]
        """
        try:
            text = self.complete(
                EXPAND_SYSTEM_PROMPT.format(language=language),
                EXPAND_PROMPT.format(query=query, language=language),
                max_tokens=200,
            )
        except DependencyUnavailableError as e:
            logger.warning(f"쿼리 확장 실패: {e}")
            return [query]

        return parse_terms(text) or [query]

    def summarize(self, content: str, max_length: int = 150) -> str:
        """본문 요약 (실패 시 DependencyUnavailableError, 잘라내기는 호출자 몫)"""
        return self.complete(
            SUMMARY_SYSTEM_PROMPT,
            SUMMARY_PROMPT.format(max_length=max_length, content=content),
            max_tokens=math.ceil(max_length / 2),
        )
