import io

from ..timing import Timing


class TestTiming:

    def test_decorator(self):
        out = io.StringIO()
        timing = Timing(outfile=out)

        @timing
        def square(x):
            return x*x

        assert square(3) == 9
        assert square(4) == 16
        assert "call to `square'" in out.getvalue()
        assert timing.totals["square"] >= 0.0

    def test_disabled(self):
        out = io.StringIO()
        timing = Timing(outfile=out, enabled=False)
        timing.reset("start")
        assert timing.log("done") >= 0.0
        assert out.getvalue() == ""

    def test_output_file(self, tmp_path):
        path = tmp_path / "timing.log"
        timing = Timing(outfile=str(path))
        timing.log("step")
        timing.fp.close()
        assert path.read_text().startswith("step ")
