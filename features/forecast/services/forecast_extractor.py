import json
import logging
import re
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup
from pydantic import ValidationError

from features.forecast.models.forecast_types import RawSeriesBundle
from features.common.exceptions.scrape_exceptions import (
    NoDataBlockError,
    MalformedDataError,
    MissingSpotError
)
from core.config import settings

logger = logging.getLogger(__name__)

class ForecastExtractor:
    """Pulls the raw forecast series out of a Windfinder spot page.

    The page embeds its forecast records as a JSON array inside an inline
    script (``window.ctx.push({... fcData: [...] ...})``). Wave periods, air
    temperatures and the spot name are only rendered in the DOM and are read
    from there.
    """

    def __init__(
        self,
        push_marker: Optional[str] = None,
        data_key: Optional[str] = None,
        selectors: Optional[Dict[str, str]] = None
    ):
        self.push_marker = push_marker or settings.data_block["push_marker"]
        self.data_key = data_key or settings.data_block["data_key"]
        self.selectors = {**settings.selectors, **(selectors or {})}
        self._key_pattern = re.compile(re.escape(self.data_key) + r'"?\s*:', re.IGNORECASE)

    def extract(self, document_text: str) -> RawSeriesBundle:
        """Parse a fetched page and extract its raw forecast series."""
        soup = BeautifulSoup(document_text, "html.parser")
        return self.extract_from_soup(soup)

    def extract_from_soup(self, soup: BeautifulSoup) -> RawSeriesBundle:
        records = self._decode_records(self._find_data_block(soup))
        spot_name = self._parse_spot_name(soup)

        try:
            bundle = RawSeriesBundle(
                timestamps=[self._timestamp(record) for record in records],
                wind_bearings=[self._number(record.get("wd")) for record in records],
                wind_speeds=[self._number(record.get("ws")) for record in records],
                wave_bearings=[self._optional_number(record, "wad") for record in records],
                wave_heights=[self._optional_number(record, "wh") for record in records],
                wave_periods=self._parse_cells(soup, self.selectors["wave_period"]),
                air_temperatures=self._parse_cells(soup, self.selectors["air_temperature"]),
                spot_name=spot_name
            )
        except ValidationError as e:
            raise MalformedDataError(f"Forecast records do not form a valid series: {str(e)}") from e

        logger.info(f"Extracted {bundle.count} forecast records for {spot_name}")
        return bundle

    def _find_data_block(self, soup: BeautifulSoup) -> str:
        """Return the JSON array text of the last script carrying forecast data."""
        data_block = None
        for script in soup.find_all("script"):
            script_text = script.string or ""
            if self.push_marker not in script_text:
                continue
            if self.data_key.lower() not in script_text.lower():
                continue

            array_text = self._isolate_array(script_text)
            if array_text is not None:
                data_block = array_text

        if data_block is None:
            raise NoDataBlockError(f"No script block carries '{self.data_key}' forecast data")
        return data_block

    def _isolate_array(self, script_text: str) -> Optional[str]:
        array_text = None
        for match in self._key_pattern.finditer(script_text):
            start = match.end()
            while start < len(script_text) and script_text[start].isspace():
                start += 1
            if start >= len(script_text) or script_text[start] != "[":
                continue

            end = self._matching_bracket(script_text, start)
            if end is None:
                raise MalformedDataError(f"Unterminated '{self.data_key}' array in script block")
            array_text = script_text[start:end + 1]
        return array_text

    @staticmethod
    def _matching_bracket(text: str, start: int) -> Optional[int]:
        """Find the bracket closing the one at ``start``, skipping string literals."""
        depth = 0
        in_string = False
        escaped = False
        for pos in range(start, len(text)):
            char = text[pos]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue

            if char == '"':
                in_string = True
            elif char in "[{":
                depth += 1
            elif char in "]}":
                depth -= 1
                if depth == 0:
                    return pos
        return None

    @staticmethod
    def _replace_nulls(text: str) -> str:
        """Rewrite bare null literals to 0, leaving string contents alone."""
        parts = []
        last = 0
        pos = 0
        in_string = False
        escaped = False
        while pos < len(text):
            char = text[pos]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif (
                text.startswith("null", pos)
                and not text[pos - 1:pos].isalnum()
                and not text[pos + 4:pos + 5].isalnum()
            ):
                parts.append(text[last:pos])
                parts.append("0")
                pos += 4
                last = pos
                continue
            pos += 1
        parts.append(text[last:])
        return "".join(parts)

    def _decode_records(self, array_text: str) -> List[Dict[str, Any]]:
        # The page uses null for missing readings, the numeric fields want 0
        repaired = self._replace_nulls(array_text)
        try:
            records = json.loads(repaired)
        except json.JSONDecodeError as e:
            raise MalformedDataError(f"Could not decode forecast data: {str(e)}") from e

        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise MalformedDataError("Forecast data is not a list of records")
        return records

    @staticmethod
    def _timestamp(record: Dict[str, Any]) -> str:
        value = record.get("dtl")
        if not isinstance(value, str):
            raise MalformedDataError(f"Forecast record without a timestamp: {record}")
        return value

    @staticmethod
    def _number(value: Any, default: float = 0.0) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return default
        return float(value)

    def _optional_number(self, record: Dict[str, Any], key: str) -> Optional[float]:
        if key not in record:
            return None
        return self._number(record[key])

    @staticmethod
    def _leading_int(text: str) -> int:
        """Parse the first whitespace separated token of a cell, 0 if it isn't an int."""
        tokens = text.split()
        if not tokens:
            return 0
        try:
            return int(tokens[0])
        except ValueError:
            return 0

    def _parse_cells(self, soup: BeautifulSoup, selector: str) -> List[Optional[int]]:
        return [self._leading_int(cell.get_text()) for cell in soup.select(selector)]

    def _parse_spot_name(self, soup: BeautifulSoup) -> str:
        element = soup.select_one(self.selectors["spot_name"])
        if element is None:
            raise MissingSpotError("Forecast page has no spot name element")

        spot_name = element.get_text().strip()
        if not spot_name:
            raise MissingSpotError("Forecast page has an empty spot name")
        return spot_name
