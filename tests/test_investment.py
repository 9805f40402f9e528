"""
Unit tests for the SIP / lumpsum growth calculator.
"""
import pytest
from investment import InvestmentParams, project_investment
from projection import to_monthly_rate


class TestInvestmentParams:
    """Test investment parameter validation"""

    def test_defaults_valid(self):
        """Test default parameters pass validation"""
        assert InvestmentParams().validate() == []

    def test_sip_years_cannot_exceed_invest_years(self):
        """Test SIP period must fit inside the investment period"""
        params = InvestmentParams(sip_years=15, invest_years=10)
        with pytest.raises(ValueError, match="Investment years must be greater than or equal to SIP years"):
            project_investment(params)

    def test_negative_values_rejected(self):
        """Test negative inputs are reported"""
        errors = InvestmentParams(initial_investment=-1, monthly_sip=-5).validate()
        assert "Initial investment cannot be negative" in errors
        assert "Monthly SIP cannot be negative" in errors

    def test_lumpsum_year_maps_to_start_of_year(self):
        """Test an (amount, year) lumpsum lands at month year x 12"""
        projection_params = InvestmentParams(additional_lumpsums=[(1_000, 3)]).to_projection_params()
        assert projection_params.lumpsums[0].month == 36
        assert projection_params.contribution_months == 120
        assert projection_params.horizon_months == 240


class TestProjectInvestment:
    """Test SIP projection results"""

    def test_lumpsum_only_growth(self):
        """Test a lone initial investment compounds annually"""
        params = InvestmentParams(initial_investment=100_000, monthly_sip=0, step_up_pct=0,
                                  expected_return_pct=10.0, sip_years=0, invest_years=3)
        results = project_investment(params)
        assert results.yearly['year'] == [0, 1, 2, 3]
        assert results.yearly['value'][3] == pytest.approx(133_100)
        assert results.summary['total_principal'] == pytest.approx(100_000)
        assert results.summary['total_gains'] == pytest.approx(33_100)

    def test_sip_principal_with_step_up(self):
        """Test invested principal accounts for the annual step-up"""
        params = InvestmentParams(initial_investment=0, monthly_sip=1_000, step_up_pct=10.0,
                                  expected_return_pct=0.0, sip_years=2, invest_years=3)
        results = project_investment(params)
        assert results.year_rows['contributions_this_year'] == [
            pytest.approx(12_000), pytest.approx(13_200), pytest.approx(0.0)]
        assert results.summary['total_principal'] == pytest.approx(25_200)
        assert results.summary['final_value'] == pytest.approx(25_200)

    def test_growth_continues_after_sip_stops(self):
        """Test the balance keeps compounding once contributions end"""
        params = InvestmentParams(initial_investment=0, monthly_sip=1_000, step_up_pct=0,
                                  expected_return_pct=12.0, sip_years=1, invest_years=2)
        results = project_investment(params)
        assert results.yearly['value'][2] == pytest.approx(results.yearly['value'][1] * 1.12)
        assert results.year_rows['contributions_this_year'][1] == 0

    def test_first_year_value(self):
        """Test first-year SIP value matches a start-of-month annuity"""
        rate = to_monthly_rate(12.0)
        params = InvestmentParams(initial_investment=0, monthly_sip=1_000, step_up_pct=0,
                                  expected_return_pct=12.0, sip_years=1, invest_years=1)
        expected = sum(1_000 * (1 + rate) ** k for k in range(1, 13))
        assert project_investment(params).summary['final_value'] == pytest.approx(expected)

    def test_additional_lumpsum(self):
        """Test additional lumpsums increase principal in their year"""
        params = InvestmentParams(initial_investment=0, monthly_sip=0, step_up_pct=0,
                                  expected_return_pct=0.0, sip_years=0, invest_years=3,
                                  additional_lumpsums=[(50_000, 1)])
        results = project_investment(params)
        assert results.yearly['principal'] == [0, 0, 50_000, 50_000]
        assert results.year_rows['contributions_this_year'][1] == pytest.approx(50_000)

    def test_lumpsum_at_horizon_ignored(self):
        """Test a lumpsum scheduled at the final year boundary is not invested"""
        params = InvestmentParams(initial_investment=0, monthly_sip=0, step_up_pct=0,
                                  expected_return_pct=0.0, sip_years=0, invest_years=2,
                                  additional_lumpsums=[(50_000, 2)])
        results = project_investment(params)
        assert results.summary['total_principal'] == 0
        assert results.summary['final_value'] == 0

    def test_year_rows_consistent(self):
        """Test year rows chain start and end values"""
        results = project_investment(InvestmentParams())
        rows = results.year_rows
        assert len(rows['year']) == 20
        for i in range(1, len(rows['year'])):
            assert rows['start_value'][i] == rows['end_value'][i - 1]
        assert rows['end_value'][-1] == pytest.approx(results.summary['final_value'])
        for i in range(len(rows['year'])):
            assert rows['end_value'][i] == pytest.approx(
                rows['start_value'][i] + rows['contributions_this_year'][i] + rows['growth_this_year'][i])
