from django.urls import path

from apps.schematic.views import (
    CatalogsView,
    ComputeVolumesView,
    FlowVelocityView,
    GatherVolumesView,
    PressureTestView,
    StringLiftView,
    VolumeBreakdownView,
)

urlpatterns = [
    path('volumes/compute', ComputeVolumesView.as_view(), name='volumes_compute'),
    path('volumes/gather', GatherVolumesView.as_view(), name='volumes_gather'),
    path('volumes/breakdown', VolumeBreakdownView.as_view(), name='volumes_breakdown'),
    path('volumes/flow-velocity', FlowVelocityView.as_view(), name='volumes_flow_velocity'),
    path('volumes/pressure-test', PressureTestView.as_view(), name='volumes_pressure_test'),
    path('volumes/string-lift', StringLiftView.as_view(), name='volumes_string_lift'),
    path('catalogs', CatalogsView.as_view(), name='catalogs'),
]
