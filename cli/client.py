from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the reading-tree service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def insert_reading(self, timestamp: int, temperature: int, humidity: int) -> Dict[str, Any]:
        return self._send(
            "POST",
            "/readings",
            json={"timestamp": timestamp, "temperature": temperature, "humidity": humidity},
        )

    def populate(
        self, month: int, day: int, num_days: int, year: Optional[int] = None
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"month": month, "day": day, "num_days": num_days}
        if year is not None:
            body["year"] = year
        return self._send("POST", "/readings/populate", json=body)

    def search(self, timestamp: int) -> Dict[str, Any]:
        # A miss is reported as 404 with the same payload shape as a hit.
        return self._send("GET", f"/readings/{timestamp}", allow_not_found=True)

    def table(self) -> Dict[str, Any]:
        return self._send("GET", "/readings")

    def reset(self) -> Dict[str, Any]:
        return self._send("DELETE", "/readings")

    def _send(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        allow_not_found: bool = False,
    ) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, json=json)
            if allow_not_found and response.status_code == 404:
                return response.json()
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = self._error_detail(exc.response) or "no detail provided."
            typer.secho(
                f"Request failed with status {exc.response.status_code}: {detail}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1)
        return response.json()

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text.strip()
        detail = data.get("detail") if isinstance(data, dict) else None
        if isinstance(detail, list):
            # Request validation errors carry one entry per rejected field.
            return "; ".join(
                f"{(item.get('loc') or ['request'])[-1]}: {item.get('msg')}"
                for item in detail
                if isinstance(item, dict)
            )
        return str(detail) if detail else ""
