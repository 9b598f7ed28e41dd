""" Tests of equilibration, measurement schedule and output of the dry friction simulation."""
import numpy as np
import pytest
from act_dry.bdsim.dry import DryFrictionSim, simulate, MSD_GROWTH
from act_dry.bdsim.langevin import BINS, HALF_WIDTH
from act_dry.bdsim.output import OutputStreams, output_path, STREAMS, TRAJECTORY_STREAMS
from act_dry.analysis.files import process_stream, read_msd, read_density


class RecordingStreams:
    """ Stand-in for OutputStreams that keeps the records in memory."""

    def __init__(self):
        self.ensemble = []
        self.msd = []
        self.density = None

    def write_ensemble(self, t, x, v, n):
        self.ensemble.append((t, x.copy(), v.copy(), n.copy()))

    def write_msd(self, t, msd):
        self.msd.append((t, msd))

    def write_density(self, velocities, density):
        self.density = (velocities, density)


SMALL = dict(N=5, D=1.0, dt=0.01, tf=2.0, teq=0.5, tau=1.0, f0=0.5, delta=0.3,
             tf_trajectory=0.1)


@pytest.mark.parametrize('bad', [dict(N=0), dict(N=-3), dict(dt=0.0), dict(dt=-0.01),
                                 dict(tau=0.0), dict(D=-1.0), dict(tf_trajectory=0.0)])
def test_invalid_parameters(bad):
    params = dict(SMALL, **bad)
    with pytest.raises(ValueError):
        DryFrictionSim(**params)


def test_init_zeroes_state():
    sim = DryFrictionSim(seed=0, **SMALL)
    sim.equilibrate()
    sim.init()
    for arr in (sim.x, sim.v, sim.n, sim.xinit, sim.rho):
        assert not arr.any()
    assert sim.t == 0.0
    assert sim.var_noise == pytest.approx(np.sqrt(2 * 1.0 * 0.01))
    assert sim.activity_noise == pytest.approx(np.sqrt(2 * 0.01 / 1.0))
    assert len(sim.rho) == 2 * BINS * HALF_WIDTH


def test_step_advances_time():
    sim = DryFrictionSim(seed=0, **SMALL)
    for _ in range(3):
        sim.step()
    assert sim.t == pytest.approx(0.03)
    assert sim.rho.sum() == 3 * SMALL['N']


def test_equilibration_snapshot():
    sim = DryFrictionSim(seed=1, **SMALL)
    sim.equilibrate(0.5)
    assert 0.5 <= sim.t < 0.5 + sim.dt
    assert sim.x.any()
    np.testing.assert_array_equal(sim.xinit, sim.x)
    xinit = sim.xinit.copy()
    sim.step()
    np.testing.assert_array_equal(sim.xinit, xinit)


def test_equilibration_of_zero_length(zero_rng):
    sim = DryFrictionSim(rng=zero_rng, **dict(SMALL, teq=0.0))
    sim.equilibrate()
    assert sim.t == 0.0
    assert sim.rho.sum() == 0


def test_fixed_seed_is_reproducible(tmp_path):
    simulate(tmp_path / 'a' / 'run', seed=42, **SMALL)
    simulate(tmp_path / 'b' / 'run', seed=42, **SMALL)
    for stream in STREAMS:
        first = output_path(tmp_path / 'a' / 'run', stream).read_bytes()
        second = output_path(tmp_path / 'b' / 'run', stream).read_bytes()
        assert first == second


def test_msd_cadence_grows_geometrically():
    dt = 0.001
    sim = DryFrictionSim(seed=3, **dict(SMALL, dt=dt, tf=3.0, tf_trajectory=0.1))
    sim.equilibrate()
    streams = RecordingStreams()
    sim.run(streams)
    t_msd = np.array([t for t, _ in streams.msd])
    intervals = np.diff(np.concatenate(([0.0], t_msd)))
    thresholds = 0.1 * MSD_GROWTH ** np.arange(len(intervals))
    assert len(intervals) > 10
    assert intervals[0] == pytest.approx(0.1, abs=1.5 * dt)
    assert np.all(intervals >= thresholds - 1e-9)
    assert np.all(intervals <= thresholds + 1.5 * dt)
    np.testing.assert_allclose(intervals[1:] / intervals[:-1], MSD_GROWTH, rtol=0.03)


def test_trajectory_cadence():
    sim = DryFrictionSim(seed=3, **dict(SMALL, dt=0.125, tf=1.0, tf_trajectory=0.25))
    sim.equilibrate()
    streams = RecordingStreams()
    sim.run(streams)
    t_save = np.array([rec[0] for rec in streams.ensemble])
    np.testing.assert_array_equal(t_save, [0.25, 0.5, 0.75, 1.0])
    for t, x, v, n in streams.ensemble:
        assert x.shape == v.shape == n.shape == (SMALL['N'],)


def test_trajectories_switched_off(tmp_path):
    prefix = tmp_path / 'run'
    simulate(prefix, seed=0, output_trajectories=False, **SMALL)
    for stream in TRAJECTORY_STREAMS:
        assert not output_path(prefix, stream).exists()
    t_msd, msd = read_msd(output_path(prefix, 'misc_measurements'))
    assert len(t_msd) > 0


def test_density_is_normalized(tmp_path):
    prefix = tmp_path / 'run'
    simulate(prefix, seed=7, **SMALL)
    vel, p = read_density(output_path(prefix, 'density'))
    assert len(vel) == 2 * BINS * HALF_WIDTH
    assert vel[0] == -HALF_WIDTH
    bin_width = 1 / BINS
    assert abs(np.sum(p * bin_width) - 1) < 1e-6


@pytest.mark.parametrize('reset', [True, False])
def test_equilibration_histogram(zero_rng, reset):
    sim = DryFrictionSim(rng=zero_rng, reset_histogram=reset,
                         **dict(SMALL, dt=0.5, teq=2.0, tf=1.0))
    sim.equilibrate()
    sim.run(RecordingStreams())
    # 4 equilibration steps and 2 measurement steps
    expected = 2 if reset else 6
    assert sim.rho.sum() == expected * SMALL['N']


def test_zero_noise_scenario(tmp_path, zero_rng):
    prefix = tmp_path / 'zero'
    simulate(prefix, rng=zero_rng, N=2, D=0.0, f0=0.0, delta=0.0, tau=1.0, dt=0.01,
             teq=0.0, tf=0.05, tf_trajectory=0.01)
    for stream in ('trajectories', 'velocity'):
        t_save, X = process_stream(output_path(prefix, stream))
        assert len(t_save) >= 5
        assert X.shape == (len(t_save), 2)
        assert not X.any()
    t_msd, msd = read_msd(output_path(prefix, 'misc_measurements'))
    assert len(t_msd) > 0
    assert not msd.any()
    vel, p = read_density(output_path(prefix, 'density'))
    # every sample sits at rest
    assert p[vel == 0.0] == pytest.approx(BINS)
    assert p[vel != 0.0].sum() == 0


def test_single_realization(tmp_path):
    prefix = tmp_path / 'single'
    simulate(prefix, seed=5, **dict(SMALL, N=1))
    for stream in TRAJECTORY_STREAMS:
        lines = output_path(prefix, stream).read_text().splitlines()
        assert len(lines) > 0
        assert all(len(line.split(', ')) == 2 for line in lines)


def test_record_format(tmp_path, zero_rng):
    prefix = tmp_path / 'fmt'
    simulate(prefix, rng=zero_rng, N=3, D=0.0, f0=0.0, dt=0.5, teq=0.0, tf=0.5,
             tf_trajectory=0.5)
    assert output_path(prefix, 'trajectories').read_text() == \
        '0.500000, 0.000000, 0.000000, 0.000000\n'
    assert output_path(prefix, 'misc_measurements').read_text() == \
        '5.000000e-01, 0.000000e+00\n'
    density = output_path(prefix, 'density').read_text().splitlines()
    assert density[0] == '-101.000000, 0.000000e+00'
    assert density[BINS * HALF_WIDTH] == '0.000000, 1.000000e+01'


def test_unwritable_prefix(tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('')
    with pytest.raises(OSError):
        simulate(blocker / 'run', seed=0, **SMALL)


def test_streams_closed_when_opening_fails(tmp_path):
    prefix = tmp_path / 'run'
    # a directory in place of the MSD file
    output_path(prefix, 'misc_measurements').mkdir()
    streams = OutputStreams(prefix)
    with pytest.raises(OSError):
        streams.__enter__()
    assert set(streams.files) == set(TRAJECTORY_STREAMS)
    assert all(f.closed for f in streams.files.values())


def test_streams_closed_after_run(tmp_path):
    with OutputStreams(tmp_path / 'run') as streams:
        files = list(streams.files.values())
        assert len(files) == len(STREAMS)
    assert all(f.closed for f in files)
    assert streams.files == {}


def test_empty_histogram_writes_zero_density(zero_rng, capsys):
    sim = DryFrictionSim(rng=zero_rng, **dict(SMALL, teq=0.5, tf=0.0))
    sim.equilibrate()
    streams = RecordingStreams()
    sim.run(streams)
    assert 'WARNING: no velocity fell inside the histogram' in capsys.readouterr().out
    vel, density = streams.density
    assert len(vel) == len(density) == 2 * BINS * HALF_WIDTH
    assert not density.any()
    assert streams.msd == []
