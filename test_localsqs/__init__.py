from .fakes import ScriptedSession, FakeResponse, FakeContainer, docker_available, connection_refused

test_localsqs_str = "testlocalsqs"
