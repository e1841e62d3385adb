from django_processoutput import signals


class TestSignals:
    def test_all_signals_exist(self):
        for name in ["pre_process_monitor", "post_process_monitor"]:
            signal = getattr(signals, name)
            assert signal is not None

    def test_signal_can_connect_and_send(self):
        received: list[dict] = []

        def handler(sender, **kwargs):
            received.append(kwargs)

        signals.pre_process_monitor.connect(handler, dispatch_uid="test_signal")
        try:
            signals.pre_process_monitor.send(sender=self.__class__, command=("echo",), environment=None)
            assert len(received) == 1
            assert received[0]["command"] == ("echo",)
        finally:
            signals.pre_process_monitor.disconnect(dispatch_uid="test_signal")
