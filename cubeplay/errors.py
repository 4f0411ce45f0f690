class CubeError(Exception):
    pass


class MalformedFaceletString(CubeError):
    pass


class InvalidMoveToken(CubeError):
    pass


class SolverFailure(CubeError):
    pass
