"""
Fixed checklist vocabularies for the workshop.

Task names are alphabetically sorted within each service tier. The trailer
inspection is grouped into named sections; its rows are stored flat with a
``section`` tag on each task.
"""

SERVICE_A = "Service A"
SERVICE_B = "Service B"
SERVICE_C = "Service C"
SERVICE_D = "Service D"

SERVICE_A_TASKS = [
    "Adjust brakes (raise axles)",
    "Brakes are in good serviceable condition; second check sign-off",
    "Check air cleaner restriction indicator and/or air cleaner element condition – replace if necessary",
    "Check air intake system for leaks, cracks or damage – report defects",
    "Check all air suspension components including airbags, height control valves, hoses – report defects",
    "Check all fleet I.D.; replace if missing, damaged or faded",
    "Check all steering components including king pins, ball joints & steering column – report defects",
    "Check all transmission, rear axles & hubs lubricant levels – report any leaks",
    "Check all tyre pressures; fit valve caps; report any abnormal wear or damage",
    "Check battery security & fluid levels; check terminals, clean & lubricate",
    "Check brake linings, drums, disc pads, rotors & adjusters for wear; check hub seals for leakage",
    "Check brakes system for audible air leaks",
    "Check cabin and bonnet tilt system, mounting bolts & operation, reservoir level, leaks & locks",
    "Check clutch free travel/clearance and adjust as required",
    "Check condition and security of mudflaps, mudguards and spray suppression",
    "Check condition and security of registration plates and marker plates",
    "Check condition of driveline components – report defects",
    "Check condition of fire extinguisher, security, current service tag – report if not fitted",
    "Check condition of windscreen, cabin glass, mirrors and mirror security",
    "Check cooling system level & condition of all hoses; top coolant up if necessary – record usage",
    "Check current registration and/or RWC label, label conditions and remove expired registration labels",
    "Check engine oil level & engine oil leaks; top up as required; report defects",
    "Check hydraulic hoses and connections for wear, leaks and potential issues",
    "Check hydraulic oil reservoir level; refill if necessary – record usage",
    "Check mechanical suspension components, springs, hangers, bushes and U-bolts – report defects",
    "Check operation & condition of all exterior lights & reflectors",
    "Check operation of all gauges, warning lights & buzzers, electrical accessories & ABS (if fitted)",
    "Check operation of reversing buzzer, interior lights, horn and all pedal pads/rubbers",
    "Check overhead mounting for cracks",
    "Check park brake operation",
    "Check power steering oil level; top up as required; report any leaks",
    "Check seat belt operation & condition; check seat condition – advise if repairs necessary",
    "Check shock absorber for leaks, damage and worn mountings – report defects",
    "Check steer axle wheel bearing adjustment, oil levels – report defects",
    "Check tension & condition of all Vee-belts; check component mountings for security",
    "Check windscreen wiper & washer operation; top up reservoir; replace wiper blades if required",
    "Check, record and clear any diagnostic fault codes – advise workshop manager of logged codes",
    "Completely grease including turntable; replace damaged or missing nipples (raise vehicle if necessary)",
    "Drain air tanks & build up air pressure; check brake systems valves, pipes & hoses for air leaks",
    "Drain water separator on Horton fan air supply; report excessive oil in air system",
    "Fit wheel chocks and danger tags (render vehicle safe)",
    "Raise bonnet/cabin & visually check engine bay & components – report defects",
    "Remove grease marks from cabin area",
    "Return updated repair request to the vehicle or appropriate person. At completion of the A service, remove danger tag and wheel chocks",
    "Tension all wheel nuts; 10 stud rims to 450 ft/lbs",
    "Update service sticker & attach",
]

SERVICE_C_TASKS = [
    "Adjust brakes",
    "Adjust brakes (raise axles)",
    "Brakes are in good serviceable condition; second check sign-off",
    "Check air cleaner restriction indicator and/or air cleaner element condition – replace if necessary",
    "Check air intake system for leaks, cracks or damage – report defects",
    "Check all air suspension components including airbags, height control valves, hoses – report defects",
    "Check all fleet I.D.; replace if missing, damaged or faded",
    "Check all steering components including king pins, ball joints & steering column – report defects",
    "Check all transmission, rear axles & hubs lubricant levels – report any leaks",
    "Check all tyre pressures; fit valve caps; report any abnormal wear or damage",
    "Check battery security & fluid levels; check terminals, clean & lubricate",
    "Check brake linings and record",
    "Check brake linings, drums, disc pads, rotors & adjusters for wear; check hub seals for leakage",
    "Check brakes system for audible air leaks",
    "Check cabin and bonnet tilt system, mounting bolts & operation, reservoir level, leaks & locks",
    "Check clutch and adjust if needed",
    "Check clutch free travel/clearance and adjust as required",
    "Check condition and security of mudflaps, mudguards and spray suppression",
    "Check condition and security of registration plates and marker plates",
    "Check condition of driveline components – report defects",
    "Check condition of fire extinguisher, security, current service tag – report if not fitted",
    "Check condition of windscreen, cabin glass, mirrors and mirror security",
    "Check cooling system level & condition of all hoses; top coolant up if necessary – record usage",
    "Check current registration and/or RWC label, label conditions and remove expired registration labels",
    "Check differential oil levels",
    "Check engine oil level & engine oil leaks; top up as required; report defects",
    "Check for any oil/fuel leaking",
    "Check gearbox oil level",
    "Check hub seals for leaking",
    "Check hydraulic hoses and connections for wear, leaks and potential issues",
    "Check hydraulic oil reservoir level; refill if necessary – record usage",
    "Check mechanical suspension components, springs, hangers, bushes and U-bolts – report defects",
    "Check operation & condition of all exterior lights & reflectors",
    "Check operation of all gauges, warning lights & buzzers, electrical accessories & ABS (if fitted)",
    "Check operation of reversing buzzer, interior lights, horn and all pedal pads/rubbers",
    "Check overhead mounting for cracks",
    "Check park brake operation",
    "Check power steering oil level; top up as required; report any leaks",
    "Check seat belt operation & condition; check seat condition – advise if repairs necessary",
    "Check shock absorber for leaks, damage and worn mountings – report defects",
    "Check steer axle wheel bearing adjustment, oil levels – report defects",
    "Check tension & condition of all Vee-belts; check component mountings for security",
    "Check turntable",
    "Check wheel bearing play",
    "Check windscreen wiper & washer operation; top up reservoir; replace wiper blades if required",
    "Check, record and clear any diagnostic fault codes – advise workshop manager of logged codes",
    "Clean and fit engine drain plug",
    "Completely grease including turntable; replace damaged or missing nipples (raise vehicle if necessary)",
    "Drain air tanks & build up air pressure; check brake systems valves, pipes & hoses for air leaks",
    "Drain engine oil (take oil sample for test on customer request if any)",
    "Drain gearbox oil (take oil sample for test on customer request if any)",
    "Drain water separator on Horton fan air supply; report excessive oil in air system",
    "Fill engine oil and record",
    "Fill gearbox oil",
    "Fit wheel chocks and danger tags (render vehicle safe)",
    "Raise bonnet/cabin & visually check engine bay & components – report defects",
    "Remove grease marks from cabin area",
    "Replace air filter",
    "Replace cab filter",
    "Replace fuel filter",
    "Replace gearbox oil filter",
    "Replace oil filters",
    "Return updated repair request to the vehicle or appropriate person. At completion of the A service, remove danger tag and wheel chocks",
    "Tension all wheel nuts; 10 stud rims to 450 ft/lbs",
    "Update service sticker & attach",
]

# Service B is the A inspection plus an engine oil and filter change.
SERVICE_B_TASKS = sorted(SERVICE_A_TASKS + [
    "Check for any oil/fuel leaking",
    "Clean and fit engine drain plug",
    "Drain engine oil (take oil sample for test on customer request if any)",
    "Fill engine oil and record",
    "Replace fuel filter",
    "Replace oil filters",
])

# Service D is the C service plus differential, coolant and dryer work.
SERVICE_D_TASKS = sorted(SERVICE_C_TASKS + [
    "Check coolant concentration and record",
    "Drain differential oil (take oil sample for test on customer request if any)",
    "Fill differential oil",
    "Replace air dryer cartridge",
    "Replace power steering filter",
    "Replace water separator filter",
])

SERVICE_TASKS = {
    SERVICE_A: SERVICE_A_TASKS,
    SERVICE_B: SERVICE_B_TASKS,
    SERVICE_C: SERVICE_C_TASKS,
    SERVICE_D: SERVICE_D_TASKS,
}

TRAILER_TASK_SECTIONS = [
    {
        "heading": "Electrical System",
        "description": "Check all electrical components and systems",
        "tasks": [
            "Check all electrical plugs",
            "Check battery charge and switch operation",
            "Check that all trailer lights are working",
        ],
    },
    {
        "heading": "Tires and Wheels",
        "description": "Inspect tires, wheels, and related components",
        "tasks": [
            "Inflate tire pressure to manufacturer specifications",
            "Inspect tires for cuts, wear, or bulging",
            "Inspect wheel nuts and bolts for cracks, dents, or distortion",
            "Tighten wheels to specified torque",
        ],
    },
    {
        "heading": "Brake System",
        "description": "Comprehensive brake system inspection and maintenance",
        "tasks": [
            "Adjust brakes to proper operating clearance",
            "Check brake controller settings and operation",
            "Check brake cylinders for leaks or sticking",
            "Check hand brake cable and adjustment",
            "Check/top up brake fluid level if required",
            "Inspect brake lines for cracks, leaks, or kinks",
            "Inspect brake linings for wear or contamination",
            "Inspect brake magnets for wear and current draw",
            "Inspect hubs/drums for abnormal wear or scoring",
            "Inspect wheel bearings & cups for corrosion or wear – clean and repack",
            "Lubricate all grease points",
            "Test brakes for functionality",
        ],
    },
    {
        "heading": "Suspension",
        "description": "Inspect suspension components and hardware",
        "tasks": [
            "Check U-bolts for wear and confirm tightness",
            "Inspect springs for wear and loss of arch",
            "Inspect suspension parts for bending, loose fasteners, and wear",
        ],
    },
    {
        "heading": "Body/Chassis",
        "description": "Check structural components and operational systems",
        "tasks": [
            "Check operation of landing leg",
            "Check tail gate pins/safety chains/safety bars and lubricate",
            "Check tow hitch eye wear is within limit",
            "Check tow hitch mounting and any cracks",
        ],
    },
]

TRAILER_SECTION_HEADINGS = [section["heading"] for section in TRAILER_TASK_SECTIONS]

DEFAULT_LUBRICANT_NAMES = [
    "Engine Oil",
    "Gearbox Oil",
    "Diff Oil",
    "Steering Oil",
    "Brake Oil",
    "Coolant",
    "Grease",
    "Windscreen Fluid",
    "Battery Fluid",
    "Brake Cleaner",
]

# Vehicle types
VEHICLE_TYPE_TRAILER = "Trailer"
VEHICLE_TYPE_OTHER = "Other"
SERVICE_ELIGIBLE_VEHICLE_TYPES = ["HR Truck", "MR Truck", "HR Double Axle", "Prime Mover"]
VEHICLE_TYPES = SERVICE_ELIGIBLE_VEHICLE_TYPES + [VEHICLE_TYPE_TRAILER, VEHICLE_TYPE_OTHER]

FUEL_TYPES = ["Petrol", "Diesel"]
VEHICLE_STATES = ["NSW", "VIC", "QLD", "WA", "SA", "TAS", "ACT", "NT"]

WORKERS = ["Worker 1", "Worker 2", "Worker 3", "Worker 4"]
PARTS_HANDLERS = ["Parts 1", "Parts 2", "Parts 3", "Parts 4"]
