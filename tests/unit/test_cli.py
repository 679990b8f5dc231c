"""
Tests for the mc-price command line.
"""

import pytest

from mc_option_pricing.cli import build_parser, main


class TestParser:

    def test_defaults_match_reference_scenario(self):
        args = build_parser().parse_args([])

        assert (args.expiry, args.strike, args.spot, args.vol, args.rate) == (
            1.0, 105.0, 100.0, 0.2, 0.05
        )
        assert not args.put
        assert args.method == "polar"
        assert args.strategy == "direct_terminal"

    def test_rejects_unknown_method(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--method", "sobol"])


class TestMain:

    def test_prints_price_and_error(self, capsys):
        code = main(["--paths", "2000", "--seed", "1"])
        out = capsys.readouterr().out

        assert code == 0
        assert "The price of the option is $" in out
        assert "The standard error of the simulation is $" in out

    def test_put_monthly_with_validation(self, capsys):
        code = main(["--put", "--strategy", "monthly_averaged", "--paths", "500", "--validate"])
        out = capsys.readouterr().out

        assert code == 0
        assert "[PASS] finite_result" in out

    @pytest.mark.parametrize(
        "argv",
        [
            ["--paths", "1"], ["--spot", "-5"], ["--strike", "0"], ["--vol", "-0.1"],
            ["--vol", "1000"], ["--rate", "800"],
        ],
    )
    def test_invalid_input_exit_code(self, argv, capsys):
        assert main(argv) == 1
        assert "CRITICAL" in capsys.readouterr().err
