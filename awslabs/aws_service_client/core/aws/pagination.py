# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import jmespath
import json
from ..common.errors import PaginationError, PaginationNotSupportedError
from ..common.models import Result
from .services import PaginationTemplate
from botocore.utils import merge_dicts, set_value_from_jmespath
from collections.abc import Iterator
from loguru import logger
from typing import Any


EMPTY_TOKENS = (None, '', [], {})


def _merge_page_into_result(
    result: dict[str, Any],
    page: dict[str, Any],
    result_expressions: list,
) -> dict[str, Any]:
    for result_expression in result_expressions:
        result_value = result_expression.search(page)
        if result_value is None:
            continue

        existing_value = result_expression.search(result)
        if existing_value is None:
            # Set the initial result, copying lists so pages are never mutated
            if isinstance(result_value, list):
                result_value = list(result_value)
            set_value_from_jmespath(
                result,
                result_expression.expression,
                result_value,
            )
            continue

        # Merge with existing value
        if isinstance(result_value, list):
            existing_value.extend(result_value)
        elif isinstance(result_value, (int | float | str)):
            # Modify the existing result with the sum or concatenation
            set_value_from_jmespath(
                result,
                result_expression.expression,
                existing_value + result_value,
            )

    return result


def _non_aggregate_part(page: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any]:
    part: dict[str, Any] = {}
    for key in keys:
        value = jmespath.search(key, page)
        if value is not None:
            set_value_from_jmespath(part, key, value)
    return part


class ResultPaginator:
    """Lazily iterates the pages of a paginated operation.

    Each page is fetched only when the iteration reaches it. The paginator is
    finite and cannot be restarted: once exhausted, a new one must be created.

    Supported config keys are ``page_size`` (sent in the operation's limit
    parameter), ``max_pages`` and ``starting_token`` (a value previously
    returned by ``resume_token``).
    """

    def __init__(
        self,
        client: Any,
        operation_name: str,
        args: dict[str, Any] | None,
        template: PaginationTemplate | None,
        config: dict[str, Any] | None = None,
    ):
        """Initialize the paginator; fails if the operation cannot be paginated."""
        if template is None or not template.result_key:
            raise PaginationNotSupportedError(f'Operation {operation_name} cannot be paginated')

        config = dict(config or {})
        self._client = client
        self._operation_name = operation_name
        self._args = dict(args or {})
        self._template = template
        self._page_size = config.get('page_size')
        self._max_pages = config.get('max_pages')
        self._starting_token = config.get('starting_token')
        self._resume_token: dict[str, Any] | None = None
        self._pages_fetched = 0
        self._pages = self._generate_pages()

    @property
    def result_keys(self) -> tuple[str, ...]:
        """Return the JMESPath expressions of the values each page carries."""
        return self._template.result_key

    @property
    def pages_fetched(self) -> int:
        """Return the number of pages fetched so far."""
        return self._pages_fetched

    @property
    def resume_token(self) -> dict[str, Any] | None:
        """Return the input tokens to resume from, or None once the last page was fetched."""
        return self._resume_token

    def __iter__(self) -> Iterator[Result]:
        """Return the paginator itself; it can only be iterated once."""
        return self

    def __next__(self) -> Result:
        """Fetch and return the next page."""
        return next(self._pages)

    def search(self, expression: str) -> Iterator[Any]:
        """Yield the values matched by the JMESPath expression on every page.

        Lists are flattened, so a result key expression yields the items it contains.
        """
        compiled = jmespath.compile(expression)
        for page in self:
            value = compiled.search(page)
            if isinstance(value, list):
                yield from value
            elif value is not None:
                yield value

    def build_full_result(self) -> Result:
        """Aggregate every remaining page into a single result.

        List result keys are concatenated, numbers are summed and strings are
        concatenated. Non-aggregate keys are taken from the first page.
        """
        result: dict[str, Any] = {}
        expressions = [jmespath.compile(key) for key in self.result_keys]
        non_aggregate: dict[str, Any] | None = None
        pages_processed = 0

        for page in self:
            if non_aggregate is None:
                non_aggregate = _non_aggregate_part(page, self._template.non_aggregate_keys)
            # Inject the result keys of each page into the aggregated result
            _merge_page_into_result(result, page, expressions)
            pages_processed += 1
            result['ResponseMetadata'] = page.get('ResponseMetadata')

        merge_dicts(result, non_aggregate or {})
        if self._resume_token is not None:
            result['pagination_token'] = self._resume_token

        logger.info('Processed {} pages.', pages_processed)
        return Result(result)

    def _generate_pages(self) -> Iterator[Result]:
        args = dict(self._args)
        if self._page_size is not None and self._template.limit_key:
            args[self._template.limit_key] = self._page_size
        if self._starting_token:
            args.update(self._starting_token)

        seen_tokens: set[str] = set()
        while True:
            page = self._client.execute(self._operation_name, args)
            self._pages_fetched += 1
            next_token = self._next_token(page)
            self._resume_token = next_token
            logger.info('Fetched page {} of {}', self._pages_fetched, self._operation_name)
            yield page

            if next_token is None:
                return
            if self._max_pages is not None and self._pages_fetched >= self._max_pages:
                logger.info('Reached max_pages limit while paginating {}', self._operation_name)
                return

            fingerprint = json.dumps(next_token, sort_keys=True, default=str)
            if fingerprint in seen_tokens:
                raise PaginationError(
                    f'The same next token was received twice while paginating '
                    f'{self._operation_name}: {next_token}'
                )
            seen_tokens.add(fingerprint)
            args = {**args, **next_token}

    def _next_token(self, page: dict[str, Any]) -> dict[str, Any] | None:
        template = self._template
        if not template.has_tokens:
            return None
        if template.more_results and not jmespath.search(template.more_results, page):
            return None

        tokens = {}
        for input_token, output_token in zip(template.input_token, template.output_token):
            value = jmespath.search(output_token, page)
            if value not in EMPTY_TOKENS:
                tokens[input_token] = value
        return tokens or None
