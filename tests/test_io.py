"""
Tests for parameter IO, result exports and calculator config.
"""
import pytest
import json
import zipfile
import pandas as pd
from io import StringIO
from buckets import BucketParams, BucketSimulator
from config_utils import (
    get_default_bucket_params, get_params_with_overrides,
    load_calculator_config, save_calculator_config
)
from investment import InvestmentParams
from milestones import MilestoneGoal, MilestonePlanParams
from io_utils import (
    PARAMS_TYPES, create_batch_export_zip, create_bucket_summary_report,
    dict_to_params, export_month_by_month_csv, export_year_by_year_csv,
    load_parameters_json, params_to_dict, parse_parameters_upload_json,
    save_parameters_json, validate_parameters_json
)


def _short_run(**overrides):
    params = BucketParams(max_years=2, **overrides)
    return params, BucketSimulator(params).run_simulation()


class TestParameterConversion:
    """Test parameter dictionary conversion"""

    def test_params_to_dict_basic(self):
        """Test bucket params convert to a plain dict"""
        param_dict = params_to_dict(BucketParams(monthly_requirement=40_000))
        assert param_dict['monthly_requirement'] == 40_000
        assert param_dict['tier2_duration'] == 24
        assert param_dict['max_years'] == 40

    def test_round_trip_conversion(self):
        """Test dict -> params -> dict preserves values"""
        params = BucketParams(monthly_requirement=75_000, inflation_rate=5.0, tier3_return=11.0)
        restored = dict_to_params(params_to_dict(params), BucketParams)
        assert restored == params

    def test_unknown_keys_dropped(self):
        """Test keys not on the dataclass are ignored"""
        params = dict_to_params({'monthly_requirement': 30_000, 'theme': 'dark'}, BucketParams)
        assert params.monthly_requirement == 30_000

    def test_lumpsum_tuples(self):
        """Test lumpsum pairs survive JSON as lists and load back as tuples"""
        params = InvestmentParams(additional_lumpsums=[(500_000, 5)])
        param_dict = json.loads(json.dumps(params_to_dict(params)))
        assert param_dict['additional_lumpsums'] == [[500_000, 5]]
        restored = dict_to_params(param_dict, InvestmentParams)
        assert restored.additional_lumpsums == [(500_000.0, 5)]

    def test_milestone_goals_restored(self):
        """Test milestone goal dicts load back as MilestoneGoal objects"""
        params = MilestonePlanParams(milestones=[MilestoneGoal("UG", 200_000, 18, 6.0)])
        restored = dict_to_params(json.loads(json.dumps(params_to_dict(params))), MilestonePlanParams)
        assert restored.milestones == [MilestoneGoal("UG", 200_000, 18, 6.0)]

    def test_json_file_round_trip(self, tmp_path):
        """Test saving and loading a parameters file"""
        path = tmp_path / "params.json"
        params = BucketParams(monthly_requirement=65_000, tier1_duration=12)
        save_parameters_json(params, str(path))
        assert load_parameters_json(str(path), BucketParams) == params


class TestParameterValidation:
    """Test uploaded parameter validation"""

    def test_valid_parameters(self):
        """Test validation of valid parameters"""
        is_valid, error = validate_parameters_json(json.dumps(get_default_bucket_params()))
        assert is_valid == True
        assert error == ""

    def test_invalid_json(self):
        """Test validation of invalid JSON"""
        is_valid, error = validate_parameters_json('{"monthly_requirement": 50000,')
        assert is_valid == False
        assert "Invalid JSON" in error

    def test_non_object_rejected(self):
        """Test a JSON list is not accepted as parameters"""
        with pytest.raises(ValueError, match="must be an object"):
            parse_parameters_upload_json("[1, 2, 3]")

    def test_invalid_values_reported(self):
        """Test semantic errors are returned as the message"""
        is_valid, error = validate_parameters_json(
            json.dumps({'monthly_requirement': 50_000, 'tier1_duration': 30, 'tier2_duration': 24}))
        assert is_valid == False
        assert "Tier-2 duration must be greater than or equal to Tier-1 duration" in error

    @pytest.mark.parametrize("payload", [
        {'tier1_duration': None},
        {'monthly_requirement': "50000"},
    ])
    def test_wrongly_typed_fields_reported(self, payload):
        """Test mistyped values give a validation message instead of raising"""
        is_valid, error = validate_parameters_json(json.dumps(payload))
        assert is_valid == False
        assert "must be a number" in error

    def test_fractional_horizon_reported(self):
        """Test a fractional horizon is rejected before any run"""
        is_valid, error = validate_parameters_json(json.dumps({'max_years': 2.5}))
        assert is_valid == False
        assert "whole number" in error

    def test_validate_other_calculators(self):
        """Test validation against another parameters type"""
        is_valid, error = validate_parameters_json(
            json.dumps({'sip_years': 15, 'invest_years': 10}), PARAMS_TYPES['investment'])
        assert is_valid == False
        assert "SIP years" in error


class TestCSVExports:
    """Test CSV export functionality"""

    def test_month_by_month_csv(self):
        """Test monthly records export one row per month"""
        _, results = _short_run()
        df = pd.read_csv(StringIO(export_month_by_month_csv(results)))
        assert len(df) == results.months_simulated
        assert list(df.columns[:7]) == ['month', 'requirement', 'dividend', 'tier1', 'tier2',
                                        'tier3a', 'tier3b']
        assert 'tier1_refill' in df.columns
        assert df['month'].tolist() == list(range(1, results.months_simulated + 1))

    def test_year_by_year_csv_notes_joined(self):
        """Test list-valued notes are flattened into one cell"""
        details = {'year': [1, 2], 'end_balance': [100.0, 50.0],
                   'notes': [[], ["UG (Y2): -50", "PG (Y2): -10"]]}
        df = pd.read_csv(StringIO(export_year_by_year_csv(details)))
        assert df['year'].tolist() == [1, 2]
        assert df['notes'].tolist()[1] == "UG (Y2): -50; PG (Y2): -10"

    def test_bucket_yearly_csv(self):
        """Test the bucket yearly summary exports"""
        _, results = _short_run()
        df = pd.read_csv(StringIO(export_year_by_year_csv(results.yearly_summary())))
        assert len(df) == 2
        assert 'total_corpus' in df.columns


class TestSummaryReport:
    """Test bucket summary report and batch export"""

    def test_summary_report(self):
        """Test report sections reflect the run"""
        params, results = _short_run()
        report = create_bucket_summary_report(params, results)
        assert report['simulation_info']['months_simulated'] == 24
        assert report['simulation_info']['outcome'] == 'horizon_reached'
        assert report['initial_allocation']['tier1'] == 50_000 * 16
        assert report['totals']['requirement_paid'] == pytest.approx(12 * 50_000 + 12 * 53_000)
        assert report['totals']['tier1_refills'] >= 1
        assert report['corpus']['final_requirement'] == pytest.approx(53_000)

    def test_batch_export_zip(self):
        """Test the ZIP holds all export files"""
        params, results = _short_run()
        zip_buffer = create_batch_export_zip(params, results)
        with zipfile.ZipFile(zip_buffer) as zf:
            names = set(zf.namelist())
            assert names == {'parameters.json', 'month_by_month.csv', 'year_by_year.csv',
                             'summary_report.json'}
            assert json.loads(zf.read('parameters.json'))['max_years'] == 2
            assert 'outcome' in json.loads(zf.read('summary_report.json'))['simulation_info']


class TestCalculatorConfig:
    """Test config file loading and overrides"""

    def test_missing_config_is_empty(self, tmp_path):
        """Test a missing config file yields no overrides"""
        assert load_calculator_config(str(tmp_path / "missing.json")) == {}

    def test_unreadable_config_is_empty(self, tmp_path):
        """Test malformed JSON yields no overrides"""
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        assert load_calculator_config(str(path)) == {}

    def test_config_round_trip(self, tmp_path):
        """Test saved overrides load back"""
        path = tmp_path / "config.json"
        save_calculator_config({'bucket': {'monthly_requirement': 80_000}}, str(path))
        config = load_calculator_config(str(path))
        assert config == {'bucket': {'monthly_requirement': 80_000}}

    def test_overrides_merge_over_defaults(self):
        """Test overrides replace defaults and unknown keys are ignored"""
        config = {'bucket': {'monthly_requirement': 80_000, 'colour': 'blue'}}
        params = get_params_with_overrides('bucket', config)
        assert params['monthly_requirement'] == 80_000
        assert params['tier3_return'] == 12.0
        assert 'colour' not in params

    def test_unknown_calculator(self):
        """Test unknown calculator ids raise"""
        with pytest.raises(ValueError, match="Unknown calculator"):
            get_params_with_overrides('mortgage', {})

    @pytest.mark.parametrize("calculator", ['bucket', 'investment', 'fire', 'milestones', 'expenses'])
    def test_every_calculator_has_defaults(self, calculator):
        """Test each calculator builds valid default parameters"""
        params = get_params_with_overrides(calculator, {})
        assert params
        if calculator in PARAMS_TYPES:
            assert dict_to_params(params, PARAMS_TYPES[calculator]).validate() == []
