"""
IO utilities for saving/loading calculator parameters and exporting results.
Handles JSON serialization of parameters and CSV exports of results.
"""
import io
import json
import zipfile
from dataclasses import asdict, fields
from typing import Any, Dict, List, Type

import numpy as np
import pandas as pd

from buckets import BucketParams, BucketResults, total_corpus_path
from fire import FireParams
from investment import InvestmentParams
from milestones import MilestoneGoal, MilestonePlanParams


PARAMS_TYPES = {
    'bucket': BucketParams,
    'investment': InvestmentParams,
    'fire': FireParams,
    'milestones': MilestonePlanParams,
}


def params_to_dict(params: Any) -> Dict[str, Any]:
    """
    Convert a parameters dataclass to a dictionary for JSON serialization.

    Args:
        params: Parameters dataclass instance

    Returns:
        Dictionary representation
    """
    param_dict = asdict(params)

    # Tuples become lists for JSON
    if 'additional_lumpsums' in param_dict:
        param_dict['additional_lumpsums'] = [list(ls) for ls in param_dict['additional_lumpsums']]

    return param_dict


def dict_to_params(param_dict: Dict[str, Any], params_cls: Type = BucketParams) -> Any:
    """
    Convert a dictionary to a parameters dataclass.

    Unknown keys are dropped so UI-only settings do not break loading.

    Args:
        param_dict: Dictionary with parameter values
        params_cls: Target dataclass

    Returns:
        Parameters object
    """
    known = {f.name for f in fields(params_cls)}
    filtered_dict = {k: v for k, v in param_dict.items() if k in known}

    if 'additional_lumpsums' in filtered_dict:
        filtered_dict['additional_lumpsums'] = [
            (float(amount), int(year)) for amount, year in filtered_dict['additional_lumpsums']]

    if params_cls is MilestonePlanParams and 'milestones' in filtered_dict:
        filtered_dict['milestones'] = [
            m if isinstance(m, MilestoneGoal) else MilestoneGoal(**m)
            for m in filtered_dict['milestones']]

    return params_cls(**filtered_dict)


def save_parameters_json(params: Any, filepath: str) -> None:
    """Save parameters to a JSON file"""
    with open(filepath, 'w') as f:
        json.dump(params_to_dict(params), f, indent=2)


def load_parameters_json(filepath: str, params_cls: Type = BucketParams) -> Any:
    """Load parameters of the given type from a JSON file"""
    with open(filepath, 'r') as f:
        param_dict = json.load(f)

    return dict_to_params(param_dict, params_cls)


def create_parameters_download_json(params: Any) -> str:
    """JSON string of parameters for download"""
    return json.dumps(params_to_dict(params), indent=2)


def parse_parameters_upload_json(json_string: str, params_cls: Type = BucketParams) -> Any:
    """
    Parse uploaded JSON into parameters.

    Raises:
        ValueError: If the JSON is malformed or does not describe params_cls
    """
    try:
        param_dict = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e
    if not isinstance(param_dict, dict):
        raise ValueError("Parameters JSON must be an object")
    return dict_to_params(param_dict, params_cls)


def validate_parameters_json(json_string: str, params_cls: Type = BucketParams) -> tuple[bool, str]:
    """
    Validate uploaded parameters JSON.

    Args:
        json_string: JSON string to validate
        params_cls: Expected parameters dataclass

    Returns:
        (is_valid, error_message)
    """
    try:
        params = parse_parameters_upload_json(json_string, params_cls)
        errors = params.validate()
    except (ValueError, TypeError, KeyError) as e:
        return False, f"Parameter validation error: {e}"

    if errors:
        return False, "; ".join(errors)
    return True, ""


def export_month_by_month_csv(results: BucketResults) -> str:
    """
    Export bucket strategy records to a CSV string.

    Args:
        results: BucketResults from a simulation

    Returns:
        CSV string with one row per simulated month
    """
    df = pd.DataFrame(results.month_by_month_details())
    return df.to_csv(index=False)


def export_year_by_year_csv(details: Dict[str, List]) -> str:
    """
    Export a year-by-year details table to a CSV string.

    List-valued cells (milestone notes) are joined with '; '.
    """
    df = pd.DataFrame(details)
    if 'notes' in df.columns:
        df['notes'] = df['notes'].apply(lambda notes: "; ".join(notes))
    return df.to_csv(index=False)


def create_bucket_summary_report(params: BucketParams, results: BucketResults) -> Dict[str, Any]:
    """
    Create a summary report of a bucket strategy run.

    Args:
        params: Strategy inputs
        results: Strategy results

    Returns:
        Dictionary with summary information
    """
    corpus = total_corpus_path(results)
    details = results.month_by_month_details()

    report = {
        'simulation_info': {
            'months_simulated': results.months_simulated,
            'max_years': params.max_years,
            'outcome': results.outcome,
            'exhaustion_month': results.exhaustion_month,
            'years_lasted': results.years_lasted,
        },
        'initial_allocation': {
            'tier1': params.monthly_requirement * params.tier1_duration,
            'tier2': params.monthly_requirement * params.tier2_duration,
            'tier3a': params.tier3a_principal,
            'tier3b': params.tier3b_principal,
        },
        'totals': {
            'requirement_paid': float(np.sum(details['requirement'])),
            'dividends': float(np.sum(details['dividend'])),
            'tier1_refills': int(np.count_nonzero(details['tier1_refill'])),
            'tier2_refills': int(np.count_nonzero(details['tier2_refill'])),
        },
        'corpus': {
            'final': float(corpus[-1]) if len(corpus) else 0.0,
            'peak': float(np.max(corpus)) if len(corpus) else 0.0,
            'final_requirement': float(details['requirement'][-1]) if details['requirement'] else 0.0,
        },
    }

    return report


def export_summary_report_json(report: Dict[str, Any]) -> str:
    """Export a summary report as a JSON string"""
    return json.dumps(report, indent=2, default=str)


def create_batch_export_zip(params: BucketParams, results: BucketResults) -> io.BytesIO:
    """
    Create a ZIP file containing parameters, monthly records, yearly summary
    and the summary report of a bucket strategy run.
    """
    zip_buffer = io.BytesIO()

    with zipfile.ZipFile(zip_buffer, 'w', zipfile.ZIP_DEFLATED) as zip_file:
        zip_file.writestr('parameters.json', create_parameters_download_json(params))
        zip_file.writestr('month_by_month.csv', export_month_by_month_csv(results))
        zip_file.writestr('year_by_year.csv', export_year_by_year_csv(results.yearly_summary()))
        report = create_bucket_summary_report(params, results)
        zip_file.writestr('summary_report.json', export_summary_report_json(report))

    zip_buffer.seek(0)
    return zip_buffer
