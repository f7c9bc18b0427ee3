"""
Script-Lift Diagnostics

Read-only health check of a campaign's script-lift data: whether a stored
configuration exists and whether prescription data has been generated for
it. Nothing here modifies stored data.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Sequence
import logging

logger = logging.getLogger(__name__)

PrescriptionCheck = Callable[[str], bool]


@dataclass
class ConfigDetails:
    last_modified: datetime
    medications_count: int = 0
    has_target_medication: bool = False


@dataclass
class DiagnosticReport:
    """Diagnosis of one campaign."""
    campaign_id: str
    has_config: bool = False
    has_prescription_data: bool = False
    config_details: Optional[ConfigDetails] = None
    error_details: Optional[str] = None
    campaign_name: Optional[str] = None
    campaign_status: Optional[str] = None


@dataclass
class DiagnosticSummary:
    total_campaigns: int = 0
    with_config: int = 0
    with_prescription_data: int = 0
    with_both: int = 0
    with_neither: int = 0


@dataclass
class DiagnosticRun:
    """Diagnosis of every campaign in the record store."""
    success: bool = True
    reports: list[DiagnosticReport] = field(default_factory=list)
    summary: Optional[DiagnosticSummary] = None
    error: Optional[str] = None


def diagnose_campaign(
    campaign_id: str,
    store,
    prescription_check: PrescriptionCheck
) -> DiagnosticReport:
    """
    Check one campaign against a ScriptLiftConfigStore.

    Store or prescription-check failures are recorded in `error_details`
    rather than raised; fields gathered before the failure are kept.
    """
    report = DiagnosticReport(campaign_id=campaign_id)
    try:
        config = store.get(campaign_id)
        report.has_config = config is not None
        if config is not None:
            report.config_details = ConfigDetails(
                last_modified=config.last_modified,
                medications_count=len(config.medications),
                has_target_medication=config.target() is not None
            )
        report.has_prescription_data = bool(prescription_check(campaign_id))
    except Exception as e:
        logger.exception("Error diagnosing script lift for campaign %s", campaign_id)
        report.error_details = str(e) or e.__class__.__name__
        return report

    logger.debug("Diagnostic report for campaign %s: %s", campaign_id, report)
    return report


def summarize(reports: Sequence[DiagnosticReport]) -> DiagnosticSummary:
    return DiagnosticSummary(
        total_campaigns=len(reports),
        with_config=sum(1 for r in reports if r.has_config),
        with_prescription_data=sum(1 for r in reports if r.has_prescription_data),
        with_both=sum(1 for r in reports if r.has_config and r.has_prescription_data),
        with_neither=sum(1 for r in reports if not r.has_config and not r.has_prescription_data)
    )


def diagnose_all(
    campaigns,
    store,
    prescription_check: PrescriptionCheck
) -> DiagnosticRun:
    """Diagnose every campaign listed by a CampaignRecordStore."""
    try:
        records = campaigns.list()
    except Exception as e:
        logger.error("Error fetching campaigns: %s", e)
        return DiagnosticRun(success=False, error=str(e) or e.__class__.__name__)

    reports = []
    for campaign in records:
        report = diagnose_campaign(campaign.id, store, prescription_check)
        report.campaign_name = campaign.name
        report.campaign_status = campaign.status.value
        reports.append(report)

    summary = summarize(reports)
    logger.info(
        "Diagnosed %d campaigns: %d with config, %d with prescription data",
        summary.total_campaigns, summary.with_config, summary.with_prescription_data
    )
    return DiagnosticRun(success=True, reports=reports, summary=summary)
