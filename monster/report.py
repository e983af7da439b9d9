"""Query report rendering."""
import json

from .models.schemas import ReportHeader, ReportRecord

MAX_TEXT = 80


def truncate(text: str, limit: int = MAX_TEXT) -> str:
    """Shorten text to `limit` characters, marking the cut."""
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


class Report:
    """Collects query outcomes for one invocation and prints them."""

    def __init__(self, header: ReportHeader) -> None:
        self.header = header
        self.records: list[ReportRecord] = []

    def add_data(self, record: ReportRecord) -> None:
        """Append one query outcome."""
        self.records.append(record)

    @property
    def succeeded(self) -> bool:
        return bool(self.records) and all(r.success for r in self.records)

    def render(self) -> str:
        args = self.header.args
        lines = [
            f"Report for {self.header.node} | method={args.method} "
            f"address={args.address} from={args.from_block} to={args.to_block} "
            f"timeout={args.timeout}ms"
        ]

        for record in self.records:
            tag = "[ OK ]" if record.success else "[FAIL]"
            text = record.result if record.success else record.error
            lines.append(
                f"{tag} {record.target or self.header.node} "
                f"{record.duration_ms}ms {record.status or '-'} "
                f"{truncate(text or '')}".rstrip()
            )

        return "\n".join(lines)

    def render_json(self) -> str:
        return json.dumps(
            {
                "header": self.header.model_dump(mode="json"),
                "records": [r.model_dump(mode="json") for r in self.records],
            },
            indent=2,
        )

    def display(self, as_json: bool = False) -> None:
        """Print the report to stdout."""
        print(self.render_json() if as_json else self.render())
