"""
Runner — точка входа ребалансера LP позиции.

Режимы:
- --once: один цикл ребалансировки, код выхода 0/1
- по умолчанию: периодический запуск через APScheduler

Scheduler держит не более одного цикла в полёте на позицию
(max_instances=1, coalesce=True): параллельные циклы по одной
позиции небезопасны.
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger
from rich.table import Table

from src.config.logging_setup import console, setup_logging
from src.config.settings import RebalancerSettings, load_settings
from src.core.contracts import validate_rebalance_report
from src.core.errors import ConfigurationError, RebalanceError
from src.rebalancer.orchestrator import Rebalancer
from src.rebalancer.state_machine import RebalanceResult, failure_report

logger = logging.getLogger(__name__)


def build_rebalancer(settings: RebalancerSettings, signer: Any = None) -> Rebalancer:
    """Rebalancer с адаптером и позицией из настроек."""
    return Rebalancer(
        adapter=settings.build_adapter(),
        position=settings.position(),
        signer=signer,
        tolerance=settings.tolerance,
    )


def display_result(rebalancer: Rebalancer, result: RebalanceResult) -> None:
    """Таблица с итогами цикла."""
    position = rebalancer.position
    table = Table(title=f"Rebalance cycle: {position.pool_id}")
    table.add_column("Asset", style="cyan")
    table.add_column("Target", justify="right")
    table.add_column("Before", justify="right")
    table.add_column("Drift", justify="right")
    table.add_column("Deposited", justify="right", style="green")

    plan = result.plan
    table.add_row(
        position.base_symbol,
        str(position.target_base_amount),
        str(result.snapshot.base_amount),
        f"{result.drift.base_drift:.2%}",
        str(plan.resulting_base_amount) if plan is not None else "-",
    )
    table.add_row(
        position.quote_symbol,
        str(position.target_quote_amount),
        str(result.snapshot.quote_amount),
        f"{result.drift.quote_drift:.2%}",
        str(plan.resulting_quote_amount) if plan is not None else "-",
    )
    console.print(table)


def run_cycle(rebalancer: Rebalancer, report_json: bool = False) -> bool:
    """
    Один цикл с отчётом.

    Returns:
        True если цикл завершился в DONE
    """
    report: Dict[str, Any]
    try:
        result = rebalancer.rebalance()
    except RebalanceError as e:
        stage = e.stage.value if e.stage is not None else "unknown"
        logger.error(f"Rebalance cycle failed at stage '{stage}': {e.message}")
        report = failure_report(e)
        success = False
    else:
        display_result(rebalancer, result)
        report = result.to_report()
        success = True

    if report_json:
        validate_rebalance_report(report)
        console.print_json(json.dumps(report))
    return success


def start_scheduler(rebalancer: Rebalancer, interval_minutes: int, report_json: bool = False) -> None:
    """Периодический запуск ребалансировки."""
    scheduler = BlockingScheduler()

    scheduler.add_job(
        func=run_cycle,
        args=(rebalancer, report_json),
        trigger=IntervalTrigger(minutes=interval_minutes),
        id="rebalance_job",
        name="LP Position Rebalancing",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    logger.info(f"Rebalancer started for pool {rebalancer.position.pool_id}")
    logger.info(f"   Interval: {interval_minutes} minutes")
    logger.info(f"   Next run: {datetime.now() + timedelta(minutes=interval_minutes)}")

    logger.info("Running initial rebalance...")
    run_cycle(rebalancer, report_json)

    try:
        scheduler.start()
    except KeyboardInterrupt:
        logger.info("Rebalancer stopped by user")
        scheduler.shutdown()


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rebalance a single AMM liquidity position.")
    parser.add_argument("--config", default="config.yml", help="Path to the YAML configuration file")
    parser.add_argument("--once", action="store_true", help="Run a single rebalance cycle and exit")
    parser.add_argument("--interval-minutes", type=int, help="Override the scheduling interval")
    parser.add_argument("--dry-run", action="store_true", help="Force the paper venue")
    parser.add_argument("--report-json", action="store_true", help="Print the cycle report as JSON")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)

    try:
        settings = load_settings(args.config)
        overrides: Dict[str, Any] = {}
        if args.dry_run:
            overrides["dry_run"] = True
        if args.interval_minutes is not None:
            if args.interval_minutes < 1:
                raise ConfigurationError("--interval-minutes must be >= 1")
            overrides["interval_minutes"] = args.interval_minutes
        if overrides:
            settings = settings.model_copy(update=overrides)

        setup_logging(settings.log_level, settings.log_file)
        rebalancer = build_rebalancer(settings)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    logger.info(
        f"Mode: {'dry run (paper venue)' if settings.dry_run else 'live'}, "
        f"tolerance {settings.tolerance}"
    )

    if args.once:
        return 0 if run_cycle(rebalancer, args.report_json) else 1

    start_scheduler(rebalancer, settings.interval_minutes, args.report_json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
