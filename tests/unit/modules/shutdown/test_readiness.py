from graceful_shutdown.modules.shutdown.readiness import ReadinessFlag


def test_starts_ready():
    flag = ReadinessFlag()
    assert flag.is_shutting_down is False


def test_transitions_once():
    flag = ReadinessFlag()

    assert flag.mark_shutting_down() is True
    assert flag.is_shutting_down is True

    # Idempotent, and never goes back to ready
    assert flag.mark_shutting_down() is False
    assert flag.is_shutting_down is True
