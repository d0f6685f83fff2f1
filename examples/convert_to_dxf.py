import dxftag


result = dxftag.to_ezdxf(
    "examples/data/site_plan.dxf",
    "/tmp/site_plan_out.dxf",
    kinds="LINE ARC TEXT",
    dxf_version="R2010",
)
print(result)
