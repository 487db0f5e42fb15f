import main


def test_parser_defaults():
    args = main.build_parser().parse_args([])
    assert args.mode == "headless"
    assert args.N == 128
    assert args.iterations == 20
    assert args.frames is None


def test_headless_run_prints_progress(capsys):
    main.main(["--mode", "headless", "--N", "12", "--frames", "3", "--seed", "1",
               "--iterations", "5"])
    out = capsys.readouterr().out
    assert "Headless simulation | N=12 | 3 frames" in out
    assert "Frame 000" in out
    assert "Average:" in out


def test_benchmark_run_prints_each_stage(capsys):
    main.main(["--mode", "benchmark", "--N", "10", "--frames", "2", "--seed", "1",
               "--iterations", "3"])
    out = capsys.readouterr().out
    for stage in ("velocity_ms", "project1_ms", "project2_ms", "density_ms", "total_ms"):
        assert stage in out
