import platform

import strawberry


def describe_system() -> str:
    return f"{platform.system()} {platform.release()} ({platform.machine()}), Python {platform.python_version()}"


@strawberry.type
class Query:
    @strawberry.field(description="Operating system and interpreter serving this request.")
    def sys_info(self) -> str:
        return describe_system()


schema = strawberry.Schema(query=Query)
