# tests/test_trial.py
from crapssim_odds.config import StakingPolicy, TrialConfig
from crapssim_odds.dice import RandomDice, ScriptedDice
from crapssim_odds.engine import opening_state, step
from crapssim_odds.trial import TrialResult, run_trial, run_trials
from tests import write_roll_script

# Point 6, two throws of 8, then a seven-out
SHOOTER = [(2, 4), (4, 4), (5, 3), (1, 6)]


def test_bust_when_bankroll_equals_min_bet():
    policy = StakingPolicy(initial_bankroll=5, min_bet=5)
    result = run_trial(ScriptedDice([(1, 1)]), policy)
    assert result == TrialResult(rolls=1, peak_bankroll=0, final_bankroll=0, busted=True)


def test_bust_after_losing_every_come_out():
    policy = StakingPolicy(initial_bankroll=20, min_bet=5)
    result = run_trial(ScriptedDice([(1, 1)]), policy)
    assert result.rolls == 4
    assert result.peak_bankroll == 15
    assert result.busted


def test_max_rolls_cutoff():
    policy = StakingPolicy(initial_bankroll=1000, min_bet=5)
    # a steady stream of comeout sevens never busts
    result = run_trial(ScriptedDice([(3, 4)]), policy, max_rolls=25)
    assert result.rolls == 25
    assert not result.busted
    assert result.final_bankroll == 995 + 25 * 5
    assert result.peak_bankroll == result.final_bankroll + 5


def test_scripted_trials_are_deterministic(tmp_path):
    script = write_roll_script(tmp_path / "rolls.txt", SHOOTER + [(6, 6), (5, 6), (2, 2), (1, 3), (3, 4)])
    policy = StakingPolicy(odds="345")
    config = TrialConfig(policy=policy, trials=1, max_rolls=400, rolls_file=script)
    first = run_trials(config)
    second = run_trials(config)
    assert first == second


def test_peak_matches_highest_bankroll_seen():
    policy = StakingPolicy(initial_bankroll=100, min_bet=5, odds="10")
    dice = RandomDice(seed=11)
    replay = RandomDice(seed=11)

    result = run_trial(dice, policy, max_rolls=300)

    state = opening_state(policy)
    highest = state.bankroll
    for _ in range(result.rolls):
        r = step(state, replay.roll(), policy)
        highest = max(highest, r.state.bankroll, r.state.peak)
        state = r.state
    assert result.peak_bankroll == highest
    assert result.peak_bankroll >= result.final_bankroll


def test_run_trials_shares_dice_and_logs_rolls(tmp_path):
    script = write_roll_script(tmp_path / "rolls.txt", [(1, 1), (6, 6)])
    log_path = tmp_path / "rolls.log"
    config = TrialConfig(
        policy=StakingPolicy(initial_bankroll=5, min_bet=5),
        trials=3,
        rolls_file=script,
        roll_log=log_path,
    )
    results = run_trials(config)
    assert [r.rolls for r in results] == [1, 1, 1]
    # rolls continue through the script across trials
    assert log_path.read_text(encoding="utf-8") == "1 1\n6 6\n1 1\n"


def test_run_trials_uses_given_dice():
    config = TrialConfig(policy=StakingPolicy(initial_bankroll=5, min_bet=5), trials=2)
    results = run_trials(config, dice=ScriptedDice([(1, 2)]))
    assert len(results) == 2
    assert all(r.busted and r.rolls == 1 for r in results)


def test_run_trials_logs_rolls_from_given_dice(tmp_path):
    log_path = tmp_path / "rolls.log"
    config = TrialConfig(policy=StakingPolicy(initial_bankroll=5, min_bet=5), trials=2, roll_log=log_path)
    results = run_trials(config, dice=ScriptedDice([(1, 2), (6, 6)]))
    assert [r.rolls for r in results] == [1, 1]
    assert log_path.read_text(encoding="utf-8") == "1 2\n6 6\n"
