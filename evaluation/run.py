"""Main evaluation script - generates JSON results."""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

sys.path.insert(0, str(Path(__file__).parent.parent))

from evaluation.config import EvalConfig
from evaluation.loader import LabelledMessage, load_messages, sample_messages
from support_triage.config.settings import get_settings
from support_triage.infrastructure.llm.client import LLMClientHandle
from support_triage.orchestrator.pipeline import AnalysisOrchestrator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def evaluate_message(orchestrator: AnalysisOrchestrator, item: LabelledMessage) -> dict[str, Any]:
    """Evaluate a single labelled message."""
    logger.info(f"[{item.id}] {item.message[:60]}...")

    record = await orchestrator.analyze(item.message)

    return {
        "id": item.id,
        "message": item.message,
        "gold_category": item.category,
        "gold_urgency": item.urgency,
        "gold_escalate": item.expected_escalate,
        "predicted_category": record.category.value,
        "predicted_urgency": record.urgency.value,
        "predicted_urgency_score": record.urgency_score,
        "predicted_escalate": record.escalate,
        "escalate_reason": record.escalate_reason,
        "error": None,
    }


def summarize(results: list[dict[str, Any]]) -> dict[str, Any]:
    """Accuracy per labelled field over the results without errors."""
    scored = [r for r in results if not r.get("error")]

    def accuracy(gold: str, predicted: str) -> float | None:
        labelled = [r for r in scored if r.get(gold) not in (None, "")]
        if not labelled:
            return None
        hits = sum(1 for r in labelled if r[gold] == r[predicted])
        return round(hits / len(labelled), 3)

    return {
        "evaluated": len(scored),
        "errors": len(results) - len(scored),
        "category_accuracy": accuracy("gold_category", "predicted_category"),
        "urgency_accuracy": accuracy("gold_urgency", "predicted_urgency"),
        "escalate_accuracy": accuracy("gold_escalate", "predicted_escalate"),
    }


async def run_evaluation(config: EvalConfig, sample_size: int | None = None) -> dict[str, Any]:
    """Run evaluation and return results."""
    messages = load_messages(config.data_path)

    if sample_size:
        messages = sample_messages(messages, n=sample_size)
        logger.info(f"Sampled {len(messages)} messages")

    settings = get_settings()
    handle = LLMClientHandle(settings)
    orchestrator = AnalysisOrchestrator(settings, handle)

    results: list[dict[str, Any]] = []
    try:
        for i, item in enumerate(messages):
            try:
                results.append(await evaluate_message(orchestrator, item))
                logger.info(f"[{i + 1}/{len(messages)}] Done")
            except Exception as e:
                logger.error(f"Error on message {item.id}: {e}")
                results.append(
                    {
                        "id": item.id,
                        "message": item.message,
                        "gold_category": item.category,
                        "gold_urgency": item.urgency,
                        "gold_escalate": item.expected_escalate,
                        "predicted_category": None,
                        "predicted_urgency": None,
                        "predicted_urgency_score": None,
                        "predicted_escalate": None,
                        "escalate_reason": None,
                        "error": str(e),
                    }
                )

            if i < len(messages) - 1:
                await asyncio.sleep(config.delay_between_messages)
    finally:
        await handle.aclose()

    return {
        "metadata": {
            "timestamp": datetime.now().isoformat(),
            "total_messages": len(results),
            "dataset": config.data_path.name,
        },
        "summary": summarize(results),
        "results": results,
    }


async def main() -> None:
    parser = argparse.ArgumentParser(description="Run support triage evaluation")
    parser.add_argument("--sample", type=int, help="Number of messages to sample")
    parser.add_argument("--delay", type=float, default=0.5, help="Delay between messages")
    parser.add_argument("--data", type=str, help="Labelled messages CSV path")
    parser.add_argument("--output", type=str, help="Output JSON path")
    args = parser.parse_args()

    config = EvalConfig(delay_between_messages=args.delay)
    if args.data:
        config.data_path = Path(args.data)
    output = await run_evaluation(config, sample_size=args.sample)

    output_path = Path(args.output) if args.output else config.output_path
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(output, f, indent=2, ensure_ascii=False, default=str)

    logger.info(f"Summary: {output['summary']}")
    logger.info(f"Results saved to {output_path}")


if __name__ == "__main__":
    asyncio.run(main())
